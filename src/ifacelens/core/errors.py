"""Exceptions raised inside the ifacelens pipeline.

None of these cross ``IfaceLensClient.resolve()``; the pipeline converts them
into tagged outcomes and diagnostics.
"""

from __future__ import annotations


class IfaceLensError(Exception):
    """Base class for ifacelens errors."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.path = path


class ParseFailureError(IfaceLensError):
    """A file's syntax could not be extracted."""


class ToolchainUnavailableError(IfaceLensError):
    """The tree-sitter Go grammar could not be loaded."""
