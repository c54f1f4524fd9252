"""ifacelens - structural Go interface implementation resolution."""

from ifacelens.client import IfaceLensClient
from ifacelens.core.models import (
    FileEvent,
    FileEventKind,
    ResolutionResult,
    SatisfactionRelation,
)

__version__ = "0.1.0"

__all__ = [
    "FileEvent",
    "FileEventKind",
    "IfaceLensClient",
    "ResolutionResult",
    "SatisfactionRelation",
    "__version__",
]
