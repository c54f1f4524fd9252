"""Unit tests for the resolution cache.

A fake loader counts calls and a fake clock drives expiry, so no Go parsing
happens here.
"""

import os
import threading
from pathlib import Path

import pytest

from ifacelens.core.models import PackageSymbolTable, ResolutionResult
from ifacelens.services.cache_service import ResolutionCache, normalize_path


class CountingLoader:
    """Loader returning a fresh result per call and recording the paths."""

    def __init__(self) -> None:
        self.calls: list[Path] = []
        self.before_return = None

    def __call__(self, path: Path) -> ResolutionResult:
        self.calls.append(path)
        if self.before_return is not None:
            self.before_return(path)
        directory = str(path.parent)
        return ResolutionResult(
            path=str(path),
            directory=directory,
            table=PackageSymbolTable(path=directory, name=f"v{len(self.calls)}"),
        )


@pytest.fixture
def loader() -> CountingLoader:
    return CountingLoader()


@pytest.fixture
def cache(loader: CountingLoader, clock) -> ResolutionCache:
    return ResolutionCache(loader, clock=clock, file_ttl=30.0, package_ttl=300.0)


class TestNormalizePath:
    def test_relative_and_dotted_paths_agree(self, tmp_path: Path) -> None:
        dotted = tmp_path / "pkg" / ".." / "pkg" / "a.go"
        assert normalize_path(dotted) == os.path.normpath(str(tmp_path / "pkg" / "a.go"))


class TestCacheHits:
    """Tests for memoization."""

    def test_repeated_resolve_loads_once(
        self, cache: ResolutionCache, loader: CountingLoader
    ) -> None:
        first = cache.get("/pkg/a.go")
        second = cache.get("/pkg/a.go")
        assert first is second
        assert len(loader.calls) == 1
        assert cache.stats.file_hits == 1

    def test_sibling_served_from_package_entry(
        self, cache: ResolutionCache, loader: CountingLoader
    ) -> None:
        cache.get("/pkg/a.go")
        result = cache.get("/pkg/b.go")
        assert len(loader.calls) == 1
        assert result.table.name == "v1"
        assert cache.stats.package_hits == 1
        assert "/pkg/b.go" in cache

    def test_sibling_result_names_queried_file(
        self, cache: ResolutionCache, loader: CountingLoader
    ) -> None:
        first = cache.get("/pkg/a.go")
        sibling = cache.get("/pkg/b.go")
        assert sibling.path == normalize_path("/pkg/b.go")
        assert first.path == normalize_path("/pkg/a.go")
        assert sibling.table is first.table
        assert cache.peek("/pkg/c.go").path == normalize_path("/pkg/c.go")
        assert cache.get("/pkg/b.go") is sibling

    def test_other_directory_loads(self, cache: ResolutionCache, loader: CountingLoader) -> None:
        cache.get("/pkg/a.go")
        cache.get("/other/a.go")
        assert len(loader.calls) == 2

    def test_peek_does_not_load(self, cache: ResolutionCache, loader: CountingLoader) -> None:
        assert cache.peek("/pkg/a.go") is None
        cache.get("/pkg/a.go")
        assert cache.peek("/pkg/a.go") is not None
        assert len(loader.calls) == 1


class TestExpiry:
    """Tests for TTL handling with an injected clock."""

    def test_file_entry_expires_package_entry_serves(
        self, cache: ResolutionCache, loader: CountingLoader, clock
    ) -> None:
        cache.get("/pkg/a.go")
        clock.advance(31)
        cache.get("/pkg/a.go")
        assert len(loader.calls) == 1
        assert cache.stats.package_hits == 1

    def test_file_entry_fresh_just_before_ttl(
        self, cache: ResolutionCache, loader: CountingLoader, clock
    ) -> None:
        cache.get("/pkg/a.go")
        clock.advance(29.9)
        cache.get("/pkg/a.go")
        assert cache.stats.file_hits == 1

    def test_package_entry_expires(
        self, cache: ResolutionCache, loader: CountingLoader, clock
    ) -> None:
        cache.get("/pkg/a.go")
        clock.advance(301)
        result = cache.get("/pkg/a.go")
        assert len(loader.calls) == 2
        assert result.table.name == "v2"

    def test_package_hit_restamps_file_entry(
        self, cache: ResolutionCache, loader: CountingLoader, clock
    ) -> None:
        cache.get("/pkg/a.go")
        clock.advance(31)
        cache.get("/pkg/a.go")  # package hit, file entry re-stamped
        clock.advance(10)
        cache.get("/pkg/a.go")
        assert cache.stats.file_hits == 1


class TestInvalidation:
    """Tests for explicit invalidation."""

    def test_invalidate_file_forces_reload(
        self, cache: ResolutionCache, loader: CountingLoader
    ) -> None:
        cache.get("/pkg/a.go")
        cache.invalidate("/pkg/a.go")
        result = cache.get("/pkg/a.go")
        assert len(loader.calls) == 2
        assert result.table.name == "v2"

    def test_invalidate_file_drops_package_entry(
        self, cache: ResolutionCache, loader: CountingLoader
    ) -> None:
        cache.get("/pkg/a.go")
        cache.get("/pkg/b.go")
        cache.invalidate("/pkg/a.go")
        assert cache.peek("/pkg/a.go") is None
        # b.go's own file entry survives until it expires
        assert cache.peek("/pkg/b.go") is not None

    def test_invalidate_all(self, cache: ResolutionCache, loader: CountingLoader) -> None:
        cache.get("/pkg/a.go")
        cache.get("/other/a.go")
        cache.invalidate()
        assert len(cache) == 0
        cache.get("/pkg/a.go")
        assert len(loader.calls) == 3

    def test_invalidate_directory(self, cache: ResolutionCache, loader: CountingLoader) -> None:
        cache.get("/pkg/a.go")
        cache.get("/pkg/b.go")
        cache.get("/other/c.go")
        cache.invalidate_directory("/pkg")
        assert cache.peek("/pkg/a.go") is None
        assert cache.peek("/pkg/b.go") is None
        assert cache.peek("/other/c.go") is not None

    def test_invalidate_unknown_path_is_noop(self, cache: ResolutionCache) -> None:
        cache.invalidate("/nowhere/x.go")
        assert len(cache) == 0


class TestConcurrentInvalidation:
    """Loads overlapping an invalidation must not cache stale results."""

    def test_write_discarded_when_invalidated_mid_load(
        self, cache: ResolutionCache, loader: CountingLoader
    ) -> None:
        loader.before_return = lambda path: (
            cache.invalidate(path) if len(loader.calls) == 1 else None
        )
        stale = cache.get("/pkg/a.go")
        assert stale.table.name == "v1"
        assert cache.stats.discarded_writes == 1
        assert cache.peek("/pkg/a.go") is None

        fresh = cache.get("/pkg/a.go")
        assert fresh.table.name == "v2"
        assert cache.peek("/pkg/a.go") is fresh

    def test_write_discarded_when_directory_invalidated(
        self, cache: ResolutionCache, loader: CountingLoader
    ) -> None:
        loader.before_return = lambda path: cache.invalidate_directory(path.parent)
        cache.get("/pkg/a.go")
        assert cache.stats.discarded_writes == 1
        assert len(cache) == 0

    def test_parallel_gets_return_results(
        self, cache: ResolutionCache, loader: CountingLoader
    ) -> None:
        results: list[ResolutionResult] = []
        lock = threading.Lock()

        def worker(name: str) -> None:
            result = cache.get(f"/pkg/{name}.go")
            with lock:
                results.append(result)

        threads = [threading.Thread(target=worker, args=(f"f{i}",)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(results) == 8
        assert all(r.directory == os.path.normpath("/pkg") for r in results)
        assert cache.peek("/pkg/f0.go") is not None

    def test_counters_exact_under_contention(
        self, cache: ResolutionCache, loader: CountingLoader
    ) -> None:
        cache.get("/pkg/a.go")
        barrier = threading.Barrier(8)

        def worker() -> None:
            barrier.wait()
            for _ in range(200):
                cache.get("/pkg/a.go")

        threads = [threading.Thread(target=worker) for _ in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert cache.stats.file_hits == 8 * 200
        assert cache.stats.loads == 1
