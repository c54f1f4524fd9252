"""Language adapters for extracting symbols from source code.

This module provides the base classes and the Go implementation used to
build per-file symbol tables.
"""

from ifacelens.adapters.base import (
    ExtractionOutcome,
    ExtractionStatus,
    LanguageAdapter,
)
from ifacelens.adapters.go import GoAdapter

__all__ = [
    "ExtractionOutcome",
    "ExtractionStatus",
    "GoAdapter",
    "LanguageAdapter",
]
