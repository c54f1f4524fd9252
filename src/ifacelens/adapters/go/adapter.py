"""Go language adapter using tree-sitter-go.

This module implements the LanguageAdapter interface for Go source code.
The grammar is loaded lazily; a grammar that cannot be loaded is reported as
an unavailable toolchain instead of failing the caller.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

import tree_sitter_go as tsgo
from tree_sitter import Language

from ifacelens.adapters.base import ExtractionOutcome, ExtractionStatus, LanguageAdapter
from ifacelens.adapters.go.annotations import AnnotationParser
from ifacelens.adapters.go.extractor import GoSymbolExtractor
from ifacelens.core.errors import ParseFailureError, ToolchainUnavailableError

logger = logging.getLogger(__name__)


class GoAdapter(LanguageAdapter):
    """Go language adapter using tree-sitter."""

    source_suffix = ".go"
    test_suffix = "_test.go"

    def __init__(self, annotation_parser: AnnotationParser | None = None) -> None:
        """Initialize the Go adapter.

        Args:
            annotation_parser: Parser for explicit implementation assertions
        """
        self._annotation_parser = annotation_parser or AnnotationParser()
        self._extractor: GoSymbolExtractor | None = None
        self._load_error: str | None = None
        self._lock = threading.Lock()

    @property
    def language_name(self) -> str:
        """Return Go as the supported language."""
        return "go"

    def _load_language(self) -> Language:
        try:
            return Language(tsgo.language())
        except Exception as e:
            raise ToolchainUnavailableError(f"Cannot load tree-sitter Go grammar: {e}") from e

    def get_extractor(self) -> GoSymbolExtractor:
        """Return the shared extractor, loading the grammar on first use.

        Raises:
            ToolchainUnavailableError: If the grammar cannot be loaded
        """
        if self._extractor is not None:
            return self._extractor
        with self._lock:
            if self._extractor is None:
                if self._load_error is not None:
                    raise ToolchainUnavailableError(self._load_error)
                try:
                    language = self._load_language()
                except ToolchainUnavailableError as e:
                    self._load_error = e.message
                    logger.warning(e.message)
                    raise
                self._extractor = GoSymbolExtractor(language, self._annotation_parser)
        return self._extractor

    def is_available(self) -> bool:
        """Check whether the Go grammar can be loaded."""
        try:
            self.get_extractor()
        except ToolchainUnavailableError:
            return False
        return True

    def extract_source(self, source: bytes | str, file_path: str) -> ExtractionOutcome:
        """Extract symbols from in-memory Go source.

        Args:
            source: Go source text
            file_path: Path recorded on every declaration

        Returns:
            ExtractionOutcome, tagged TOOLCHAIN_UNAVAILABLE when the grammar is missing
        """
        try:
            extractor = self.get_extractor()
        except ToolchainUnavailableError as e:
            return ExtractionOutcome.failed(
                file_path, ExtractionStatus.TOOLCHAIN_UNAVAILABLE, e.message
            )
        try:
            return extractor.extract(source, file_path)
        except ParseFailureError as e:
            logger.warning(e.message)
            return ExtractionOutcome.failed(file_path, ExtractionStatus.PARSE_FAILURE, e.message)

    def extract_file(self, file_path: Path) -> ExtractionOutcome:
        """Read and extract one Go file.

        Args:
            file_path: Path to the Go file

        Returns:
            ExtractionOutcome; unreadable files give an empty READ_FAILURE outcome
        """
        path_str = str(file_path)
        try:
            content = file_path.read_bytes()
        except OSError as e:
            logger.warning(f"Failed to read {file_path}: {e}")
            return ExtractionOutcome.failed(path_str, ExtractionStatus.READ_FAILURE, str(e))
        return self.extract_source(content, path_str)
