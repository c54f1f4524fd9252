"""Go language adapter submodule.

This module provides the Go adapter for extracting interfaces, structs and
methods from Go source code.
"""

from ifacelens.adapters.go.adapter import GoAdapter
from ifacelens.adapters.go.annotations import (
    AnnotationMatcher,
    AnnotationParser,
    RegexAnnotationMatcher,
)
from ifacelens.adapters.go.extractor import GoSymbolExtractor

__all__ = [
    "AnnotationMatcher",
    "AnnotationParser",
    "GoAdapter",
    "GoSymbolExtractor",
    "RegexAnnotationMatcher",
]
