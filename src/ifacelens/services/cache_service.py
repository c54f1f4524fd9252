"""Resolution cache with file and package granularity.

File entries live briefly (re-extracting one file is cheap); package entries
live longer (aggregating and resolving a whole directory is not). Both stores
are keyed by normalized path strings and timestamped with an injected clock
so expiry can be driven deterministically.

Entries are immutable and replaced atomically under per-key locks. Loads run
outside any lock; a load that started before an invalidation of its key does
not write its (possibly stale) result back.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from ifacelens.core.models import ResolutionResult

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Loader = Callable[[Path], ResolutionResult]


@dataclass(frozen=True)
class CacheEntry:
    """A cached result and the clock reading it was stored at."""

    result: ResolutionResult
    stored_at: float

    def age(self, now: float) -> float:
        return now - self.stored_at


@dataclass
class CacheStats:
    """Counters describing cache traffic."""

    file_hits: int = 0
    package_hits: int = 0
    misses: int = 0
    loads: int = 0
    discarded_writes: int = 0

    @property
    def hits(self) -> int:
        return self.file_hits + self.package_hits


def normalize_path(path: str | os.PathLike[str]) -> str:
    """Canonical string key for a path."""
    return os.path.normpath(os.path.abspath(os.fspath(path)))


class _KeyedLocks:
    """One lock per key, created on demand."""

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.Lock] = {}

    def get(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock


class ResolutionCache:
    """Memoize resolution results per file and per package directory."""

    def __init__(
        self,
        loader: Loader,
        *,
        clock: Clock = time.monotonic,
        file_ttl: float = 30.0,
        package_ttl: float = 300.0,
    ) -> None:
        """Initialize the cache.

        Args:
            loader: Computes a fresh result for a file path on a miss
            clock: Returns the current time in seconds
            file_ttl: Lifetime of file entries in seconds
            package_ttl: Lifetime of package entries in seconds
        """
        self._loader = loader
        self._clock = clock
        self._file_ttl = file_ttl
        self._package_ttl = package_ttl

        self._files: dict[str, CacheEntry] = {}
        self._packages: dict[str, CacheEntry] = {}
        self._file_locks = _KeyedLocks()
        self._package_locks = _KeyedLocks()

        # Bumped by invalidation; loads compare before writing
        self._generations: dict[str, int] = {}
        self._generation_lock = threading.Lock()
        self._global_generation = 0

        self.stats = CacheStats()
        self._stats_lock = threading.Lock()

    def _count(self, counter: str) -> None:
        with self._stats_lock:
            setattr(self.stats, counter, getattr(self.stats, counter) + 1)

    @staticmethod
    def _for_file(result: ResolutionResult, file_key: str) -> ResolutionResult:
        """The package result re-addressed to the queried file."""
        if result.path == file_key:
            return result
        return result.model_copy(update={"path": file_key})

    @property
    def file_ttl(self) -> float:
        return self._file_ttl

    @property
    def package_ttl(self) -> float:
        return self._package_ttl

    def _generation(self, key: str) -> tuple[int, int]:
        with self._generation_lock:
            return self._global_generation, self._generations.get(key, 0)

    def _bump(self, *keys: str) -> None:
        with self._generation_lock:
            for key in keys:
                self._generations[key] = self._generations.get(key, 0) + 1

    def _fresh(self, store: dict[str, CacheEntry], key: str, ttl: float) -> CacheEntry | None:
        entry = store.get(key)
        if entry is not None and entry.age(self._clock()) < ttl:
            return entry
        return None

    def _write(
        self,
        store: dict[str, CacheEntry],
        locks: _KeyedLocks,
        key: str,
        entry: CacheEntry,
    ) -> None:
        with locks.get(key):
            store[key] = entry

    def peek(self, path: str | os.PathLike[str]) -> ResolutionResult | None:
        """Return a fresh cached result without loading."""
        file_key = normalize_path(path)
        entry = self._fresh(self._files, file_key, self._file_ttl)
        if entry is None:
            entry = self._fresh(self._packages, os.path.dirname(file_key), self._package_ttl)
        return self._for_file(entry.result, file_key) if entry is not None else None

    def get(self, path: str | os.PathLike[str]) -> ResolutionResult:
        """Return the result for ``path``, loading it on a miss.

        Args:
            path: Source file path

        Returns:
            Cached or freshly computed ResolutionResult
        """
        file_key = normalize_path(path)
        dir_key = os.path.dirname(file_key)

        entry = self._fresh(self._files, file_key, self._file_ttl)
        if entry is not None:
            self._count("file_hits")
            logger.debug(f"File cache hit: {file_key}")
            return entry.result

        entry = self._fresh(self._packages, dir_key, self._package_ttl)
        if entry is not None:
            self._count("package_hits")
            logger.debug(f"Package cache hit: {dir_key}")
            result = self._for_file(entry.result, file_key)
            self._write(
                self._files,
                self._file_locks,
                file_key,
                CacheEntry(result, self._clock()),
            )
            return result

        self._count("misses")
        file_gen = self._generation(file_key)
        dir_gen = self._generation(dir_key)

        result = self._loader(Path(file_key))
        self._count("loads")

        if self._generation(file_key) != file_gen or self._generation(dir_key) != dir_gen:
            self._count("discarded_writes")
            logger.debug(f"Invalidated while loading, not caching: {file_key}")
            return result

        now = self._clock()
        self._write(self._packages, self._package_locks, dir_key, CacheEntry(result, now))
        self._write(self._files, self._file_locks, file_key, CacheEntry(result, now))
        return result

    def invalidate(self, path: str | os.PathLike[str] | None = None) -> None:
        """Drop cached entries.

        Args:
            path: File whose entry and package entry are dropped; None clears
                everything
        """
        if path is None:
            with self._generation_lock:
                self._global_generation += 1
            self._files = {}
            self._packages = {}
            logger.debug("Resolution cache cleared")
            return

        file_key = normalize_path(path)
        dir_key = os.path.dirname(file_key)
        self._bump(file_key, dir_key)
        with self._file_locks.get(file_key):
            self._files.pop(file_key, None)
        with self._package_locks.get(dir_key):
            self._packages.pop(dir_key, None)
        logger.debug(f"Invalidated {file_key}")

    def invalidate_directory(self, directory: str | os.PathLike[str]) -> None:
        """Drop a package entry and the entries of every file inside it."""
        dir_key = normalize_path(directory)
        siblings = [key for key in list(self._files) if os.path.dirname(key) == dir_key]
        self._bump(dir_key, *siblings)
        with self._package_locks.get(dir_key):
            self._packages.pop(dir_key, None)
        for key in siblings:
            with self._file_locks.get(key):
                self._files.pop(key, None)
        logger.debug(f"Invalidated package {dir_key} ({len(siblings)} file entries)")

    def __len__(self) -> int:
        return len(self._files) + len(self._packages)

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, os.PathLike)):
            return False
        return normalize_path(path) in self._files
