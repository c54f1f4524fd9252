"""Public client interface for ifacelens.

ifacelens exposes lower-level building blocks (adapters/ and services/).
This module provides the stable entrypoint for external callers: resolve a
file, invalidate cached results, and feed file change notifications.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ifacelens.core.config import IfaceLensConfig, get_config
from ifacelens.core.models import (
    Diagnostic,
    DiagnosticKind,
    FileEvent,
    FileEventKind,
    JumpTarget,
    Marker,
    PackageSymbolTable,
    ResolutionResult,
    ResolutionStatus,
)
from ifacelens.services.analysis_service import AnalysisService
from ifacelens.services.cache_service import Clock, ResolutionCache, normalize_path
from ifacelens.services.navigation_service import NavigationService
from ifacelens.services.package_service import PackageAggregator
from ifacelens.services.resolver_service import ImplementationResolver

logger = logging.getLogger(__name__)


class IfaceLensClient:
    """High-level client owning the analysis pipeline and its cache."""

    def __init__(
        self,
        config: IfaceLensConfig | None = None,
        *,
        clock: Clock | None = None,
        analysis: AnalysisService | None = None,
    ) -> None:
        """Create an ifacelens client.

        Args:
            config: Settings (global config when omitted)
            clock: Time source for cache expiry (monotonic clock when omitted)
            analysis: Pre-built pipeline (built from config when omitted)
        """
        self._config = config or get_config()
        self._analysis = analysis or AnalysisService(
            PackageAggregator(
                max_workers=self._config.max_workers,
                include_test_files=self._config.include_test_files,
                parent_dir_fallback=self._config.parent_dir_fallback,
            ),
            ImplementationResolver(self._config.max_embedding_iterations),
        )
        cache_kwargs = {} if clock is None else {"clock": clock}
        self._cache = ResolutionCache(
            self._analysis.analyze,
            file_ttl=self._config.file_cache_ttl,
            package_ttl=self._config.package_cache_ttl,
            **cache_kwargs,
        )

    @property
    def cache(self) -> ResolutionCache:
        return self._cache

    @property
    def config(self) -> IfaceLensConfig:
        return self._config

    def resolve(self, path: str | os.PathLike[str]) -> ResolutionResult:
        """Resolve interface satisfaction for the package of ``path``.

        Never raises; failures come back as an empty relation with
        diagnostics.

        Args:
            path: Go source file

        Returns:
            ResolutionResult (cached when fresh)
        """
        try:
            return self._cache.get(path)
        except Exception as e:
            logger.warning(f"Resolution failed for {path}: {e}")
            file_path = normalize_path(path)
            directory = os.path.dirname(file_path)
            return ResolutionResult(
                path=file_path,
                directory=directory,
                status=ResolutionStatus.ERROR,
                table=PackageSymbolTable(path=directory),
                diagnostics=[
                    Diagnostic(path=file_path, kind=DiagnosticKind.INTERNAL_ERROR, message=str(e))
                ],
            )

    def invalidate(self, path: str | os.PathLike[str] | None = None) -> None:
        """Force recomputation on the next query (everything when ``path`` is None)."""
        self._cache.invalidate(path)

    def handle_event(self, event: FileEvent) -> None:
        """Apply a file change notification.

        Saving a file invalidates it and its package. Creating or deleting a
        Go file can add or remove implementations for its siblings, so the
        whole directory is dropped. A rename is a delete of the old path plus
        a create of the new one, each applied only for a Go file name, so an
        atomic save (``b.go.tmp`` renamed to ``b.go``) still counts.
        """
        if event.kind == FileEventKind.RENAMED:
            self.handle_event(FileEvent(kind=FileEventKind.DELETED, path=event.path))
            if event.new_path:
                self.handle_event(FileEvent(kind=FileEventKind.CREATED, path=event.new_path))
            return

        if not event.path.endswith(".go"):
            return

        if event.kind == FileEventKind.SAVED:
            self._cache.invalidate(event.path)
        elif event.kind in (FileEventKind.CREATED, FileEventKind.DELETED):
            self._cache.invalidate_directory(Path(event.path).parent)

    def navigation(self, path: str | os.PathLike[str]) -> NavigationService:
        """Navigation helper over the (cached) result for ``path``."""
        return NavigationService(self.resolve(path))

    def markers(self, path: str | os.PathLike[str]) -> list[Marker]:
        """Lines of ``path`` that take part in a satisfaction."""
        return self.navigation(path).markers(normalize_path(path))

    def implementation_targets(self, path: str | os.PathLike[str], line: int) -> list[JumpTarget]:
        """Implementations reachable from an interface line of ``path``."""
        return self.navigation(path).implementation_targets(normalize_path(path), line)

    def interface_targets(self, path: str | os.PathLike[str], line: int) -> list[JumpTarget]:
        """Interfaces reachable from a struct or method line of ``path``."""
        return self.navigation(path).interface_targets(normalize_path(path), line)
