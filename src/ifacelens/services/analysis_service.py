"""Analysis service running extraction, aggregation and resolution.

This module provides the AnalysisService, the uncached pipeline behind a
resolve() query. It never raises: every failure degrades to an empty
relation with a diagnostic attached to the result.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ifacelens.core.models import (
    Diagnostic,
    DiagnosticKind,
    PackageSymbolTable,
    ResolutionResult,
    ResolutionStatus,
    SatisfactionRelation,
)
from ifacelens.services.package_service import PackageAggregator
from ifacelens.services.resolver_service import ImplementationResolver

logger = logging.getLogger(__name__)


class AnalysisService:
    """Compute the resolution result for the package of a file."""

    def __init__(
        self,
        aggregator: PackageAggregator | None = None,
        resolver: ImplementationResolver | None = None,
    ) -> None:
        """Initialize analysis service.

        Args:
            aggregator: Builds package symbol tables
            resolver: Computes satisfaction relations
        """
        self._aggregator = aggregator or PackageAggregator()
        self._resolver = resolver or ImplementationResolver()

    @property
    def aggregator(self) -> PackageAggregator:
        return self._aggregator

    @property
    def resolver(self) -> ImplementationResolver:
        return self._resolver

    def analyze(self, file_path: Path) -> ResolutionResult:
        """Run the full pipeline for the package containing ``file_path``.

        Args:
            file_path: Any source file of the package

        Returns:
            ResolutionResult; on failure an empty relation plus diagnostics
        """
        directory = str(file_path.parent)
        try:
            build = self._aggregator.build_for_file(file_path)
            relation = self._resolver.resolve(build.table)
        except Exception as e:
            logger.warning(f"Failed to resolve {file_path}: {e}")
            return ResolutionResult(
                path=str(file_path),
                directory=directory,
                status=ResolutionStatus.ERROR,
                table=PackageSymbolTable(path=directory),
                relation=SatisfactionRelation(),
                diagnostics=[
                    Diagnostic(
                        path=str(file_path),
                        kind=DiagnosticKind.INTERNAL_ERROR,
                        message=str(e),
                    )
                ],
            )

        return ResolutionResult(
            path=str(file_path),
            directory=build.directory,
            status=build.status,
            table=build.table,
            relation=relation,
            diagnostics=build.diagnostics,
        )
