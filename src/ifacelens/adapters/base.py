"""Base classes for language adapters.

This module defines the LanguageAdapter abstract interface for implementing
language-specific symbol extractors, along with the tagged outcome every
per-file extraction produces.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from ifacelens.core.models import Diagnostic, DiagnosticKind, FileSymbols


class ExtractionStatus(str, Enum):
    """Tag of a per-file extraction outcome."""

    OK = "ok"
    PARSE_FAILURE = "parse_failure"
    READ_FAILURE = "read_failure"
    TOOLCHAIN_UNAVAILABLE = "toolchain_unavailable"


_DIAGNOSTIC_KINDS = {
    ExtractionStatus.PARSE_FAILURE: DiagnosticKind.PARSE_FAILURE,
    ExtractionStatus.READ_FAILURE: DiagnosticKind.READ_FAILURE,
    ExtractionStatus.TOOLCHAIN_UNAVAILABLE: DiagnosticKind.TOOLCHAIN_UNAVAILABLE,
}


@dataclass
class ExtractionOutcome:
    """Result of extracting one file.

    Failed extractions still carry a (possibly partial or empty) symbol
    table so aggregation can proceed with the other files.
    """

    file_path: str
    symbols: FileSymbols
    status: ExtractionStatus = ExtractionStatus.OK
    message: str = ""

    @property
    def success(self) -> bool:
        """Check if the file was extracted without problems."""
        return self.status == ExtractionStatus.OK

    @property
    def diagnostic(self) -> Diagnostic | None:
        """Diagnostic describing a failed extraction, None on success."""
        if self.success:
            return None
        return Diagnostic(
            path=self.file_path,
            kind=_DIAGNOSTIC_KINDS[self.status],
            message=self.message,
        )

    @classmethod
    def failed(
        cls, file_path: str, status: ExtractionStatus, message: str
    ) -> ExtractionOutcome:
        """Build an outcome with an empty symbol table."""
        return cls(
            file_path=file_path,
            symbols=FileSymbols(file_path=file_path),
            status=status,
            message=message,
        )


class LanguageAdapter(ABC):
    """Abstract base class for language-specific symbol extractors.

    Subclasses must implement the abstract methods for their specific language.
    """

    source_suffix: str = ""
    test_suffix: str = ""

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the language this adapter handles."""
        ...

    @abstractmethod
    def is_available(self) -> bool:
        """Check whether the parsing toolchain can be loaded."""
        ...

    @abstractmethod
    def extract_source(self, source: bytes | str, file_path: str) -> ExtractionOutcome:
        """Extract symbols from in-memory source text."""
        ...

    @abstractmethod
    def extract_file(self, file_path: Path) -> ExtractionOutcome:
        """Read and extract a single file; never raises."""
        ...

    def is_source_file(self, path: Path, include_test_files: bool = True) -> bool:
        """Check whether ``path`` is a source file this adapter extracts.

        Args:
            path: Candidate file
            include_test_files: Whether test files count as sources

        Returns:
            True if the file should take part in a package
        """
        if not path.name.endswith(self.source_suffix):
            return False
        if not include_test_files and self.test_suffix and path.name.endswith(self.test_suffix):
            return False
        return True
