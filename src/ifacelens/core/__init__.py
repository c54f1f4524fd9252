"""Core module containing symbol models, errors, config and serializer."""

from ifacelens.core.errors import (
    IfaceLensError,
    ParseFailureError,
    ToolchainUnavailableError,
)
from ifacelens.core.models import (
    Diagnostic,
    DiagnosticKind,
    FileEvent,
    FileEventKind,
    FieldDecl,
    FileSymbols,
    InterfaceDecl,
    JumpTarget,
    Marker,
    MarkerKind,
    MethodImpl,
    MethodSignature,
    PackageSymbolTable,
    ResolutionResult,
    ResolutionStatus,
    Satisfaction,
    SatisfactionReason,
    SatisfactionRelation,
    StructDecl,
)
from ifacelens.core.serializer import (
    SerializationError,
    deserialize,
    deserialize_from_dict,
    serialize,
    serialize_to_dict,
)

__all__ = [
    "Diagnostic",
    "DiagnosticKind",
    "FileEvent",
    "FileEventKind",
    "FieldDecl",
    "FileSymbols",
    "IfaceLensError",
    "InterfaceDecl",
    "JumpTarget",
    "Marker",
    "MarkerKind",
    "MethodImpl",
    "MethodSignature",
    "PackageSymbolTable",
    "ParseFailureError",
    "ResolutionResult",
    "ResolutionStatus",
    "Satisfaction",
    "SatisfactionReason",
    "SatisfactionRelation",
    "SerializationError",
    "StructDecl",
    "ToolchainUnavailableError",
    "deserialize",
    "deserialize_from_dict",
    "serialize",
    "serialize_to_dict",
]
