"""Package aggregation service.

This module groups the Go files of one directory into a package, extracts
them concurrently, and merges the per-file tables into the
PackageSymbolTable the resolver runs over.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path

from ifacelens.adapters import ExtractionOutcome, ExtractionStatus, GoAdapter, LanguageAdapter
from ifacelens.core.config import get_config
from ifacelens.core.models import (
    Diagnostic,
    FileSymbols,
    PackageSymbolTable,
    ResolutionStatus,
)

logger = logging.getLogger(__name__)


@dataclass
class PackageBuild:
    """Aggregated package plus the per-file outcomes that produced it."""

    directory: str
    table: PackageSymbolTable
    outcomes: list[ExtractionOutcome] = field(default_factory=list)
    used_parent: bool = False

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return [o.diagnostic for o in self.outcomes if o.diagnostic is not None]

    @property
    def status(self) -> ResolutionStatus:
        """Worst per-file status; an unavailable toolchain outranks parse failures."""
        statuses = {o.status for o in self.outcomes}
        if ExtractionStatus.TOOLCHAIN_UNAVAILABLE in statuses:
            return ResolutionStatus.TOOLCHAIN_UNAVAILABLE
        if statuses & {ExtractionStatus.PARSE_FAILURE, ExtractionStatus.READ_FAILURE}:
            return ResolutionStatus.PARSE_FAILURE
        return ResolutionStatus.OK


class PackageAggregator:
    """Build package symbol tables from directories of source files."""

    def __init__(
        self,
        adapter: LanguageAdapter | None = None,
        *,
        max_workers: int | None = None,
        include_test_files: bool | None = None,
        parent_dir_fallback: bool | None = None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            adapter: Language adapter used for extraction (Go by default)
            max_workers: Extraction threads per package (config default)
            include_test_files: Whether test files join the package (config default)
            parent_dir_fallback: Scan the parent once for empty directories (config default)
        """
        config = get_config()
        self._adapter = adapter or GoAdapter()
        self._max_workers = max_workers if max_workers is not None else config.max_workers
        self._include_test_files = (
            include_test_files if include_test_files is not None else config.include_test_files
        )
        self._parent_dir_fallback = (
            parent_dir_fallback if parent_dir_fallback is not None else config.parent_dir_fallback
        )

    @property
    def adapter(self) -> LanguageAdapter:
        return self._adapter

    def list_source_files(self, directory: Path) -> list[Path]:
        """List the package's files, sorted for deterministic aggregation.

        Only the directory itself is listed; subdirectories are other packages.
        """
        if not directory.is_dir():
            return []
        return sorted(
            p
            for p in directory.iterdir()
            if p.is_file() and self._adapter.is_source_file(p, self._include_test_files)
        )

    def _extract_one(self, path: Path) -> ExtractionOutcome:
        try:
            return self._adapter.extract_file(path)
        except Exception as e:
            logger.warning(f"Failed to extract {path}: {e}")
            return ExtractionOutcome.failed(str(path), ExtractionStatus.PARSE_FAILURE, str(e))

    def extract_directory(self, directory: Path) -> list[ExtractionOutcome]:
        """Extract every file of a directory, in parallel when worthwhile.

        All workers are joined before this returns; outcomes keep file order.
        """
        files = self.list_source_files(directory)
        if len(files) <= 1 or self._max_workers <= 1:
            return [self._extract_one(p) for p in files]

        workers = min(self._max_workers, len(files))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="ifacelens") as pool:
            return list(pool.map(self._extract_one, files))

    @staticmethod
    def aggregate(directory: str, files: Iterable[FileSymbols]) -> PackageSymbolTable:
        """Concatenate per-file tables into one package table.

        Declarations are not deduplicated by name.

        Args:
            directory: Package directory
            files: Per-file symbol tables of that directory

        Returns:
            The package symbol table
        """
        interfaces = []
        structs = []
        methods = []
        paths = []
        package_name = ""
        for symbols in files:
            paths.append(symbols.file_path)
            interfaces.extend(symbols.interfaces)
            structs.extend(symbols.structs)
            methods.extend(symbols.methods)
            # Prefer the package proper over an external foo_test package
            name = symbols.package_name
            if name and (not package_name or package_name.endswith("_test")):
                package_name = name

        return PackageSymbolTable(
            path=directory,
            name=package_name,
            interfaces=tuple(interfaces),
            structs=tuple(structs),
            methods=tuple(methods),
            files=tuple(paths),
        )

    def _build_directory(self, directory: Path) -> PackageBuild:
        outcomes = self.extract_directory(directory)
        for outcome in outcomes:
            if not outcome.success:
                logger.warning(f"{outcome.status.value}: {outcome.message or outcome.file_path}")
        table = self.aggregate(str(directory), (o.symbols for o in outcomes))
        return PackageBuild(directory=str(directory), table=table, outcomes=outcomes)

    def build(self, directory: Path) -> PackageBuild:
        """Build the package table for a directory.

        When the directory yields no declarations, its parent is scanned once
        as a best-effort recovery; the fallback never goes further up.

        Args:
            directory: Package directory

        Returns:
            PackageBuild with the table and per-file outcomes
        """
        build = self._build_directory(directory)
        if not build.table.is_empty or not self._parent_dir_fallback:
            return build

        parent = directory.parent
        if parent == directory:
            return build

        logger.debug(f"No declarations in {directory}; scanning parent {parent}")
        parent_build = self._build_directory(parent)
        if parent_build.table.is_empty:
            build.outcomes.extend(parent_build.outcomes)
            return build
        return PackageBuild(
            directory=parent_build.directory,
            table=parent_build.table,
            outcomes=build.outcomes + parent_build.outcomes,
            used_parent=True,
        )

    def build_for_file(self, file_path: Path) -> PackageBuild:
        """Build the package containing ``file_path``."""
        return self.build(file_path.parent)
