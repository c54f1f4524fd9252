"""Symbol and relation models for ifacelens.

This module defines the data structures shared by the extraction, aggregation
and resolution stages: per-declaration records produced from Go source,
the package-level symbol table, and the computed satisfaction relation.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SatisfactionReason(str, Enum):
    """How a (interface, struct) satisfaction was established."""

    EXPLICIT = "explicit"
    STRUCTURAL = "structural"
    EMBEDDED = "embedded"
    POINTER_RECEIVER = "pointer_receiver"


class DiagnosticKind(str, Enum):
    """Kind of non-fatal problem met while resolving a package."""

    PARSE_FAILURE = "parse_failure"
    READ_FAILURE = "read_failure"
    TOOLCHAIN_UNAVAILABLE = "toolchain_unavailable"
    INTERNAL_ERROR = "internal_error"


class ResolutionStatus(str, Enum):
    """Overall outcome of a resolve() query."""

    OK = "ok"
    PARSE_FAILURE = "parse_failure"
    TOOLCHAIN_UNAVAILABLE = "toolchain_unavailable"
    ERROR = "error"


class MarkerKind(str, Enum):
    """Which side of a satisfaction a marker decorates."""

    INTERFACE = "interface"
    IMPLEMENTATION = "implementation"


class Declaration(BaseModel):
    """Base class for every located declaration.

    Lines are 0-based rows, i.e. the 1-based source line minus one, so a
    consumer can anchor a marker right above the declaration.
    """

    name: str = Field(..., description="Declared name")
    line: int = Field(..., ge=0, description="Source line - 1")
    file_path: str = Field(..., description="Declaring file")


class MethodSignature(Declaration):
    """A method required by an interface (matched by name only)."""


class InterfaceDecl(Declaration):
    """Interface type declaration."""

    methods: list[MethodSignature] = Field(default_factory=list)
    embedded_interface: str | None = Field(
        None, description="First embedded interface name (single embedding only)"
    )

    @property
    def method_names(self) -> list[str]:
        return [m.name for m in self.methods]


class FieldDecl(Declaration):
    """Struct field; embedded fields reuse the base type name as field name."""

    type_name: str = Field(..., description="Declared type, pointer stripped")
    embedded: bool = False
    is_pointer: bool = False


class StructDecl(Declaration):
    """Struct type declaration."""

    fields: list[FieldDecl] = Field(default_factory=list)
    explicit_interfaces: list[str] = Field(
        default_factory=list,
        description="Interface names asserted through comments or static assertions",
    )

    @property
    def embedded_fields(self) -> list[FieldDecl]:
        return [f for f in self.fields if f.embedded]


class MethodImpl(BaseModel):
    """Method declaration carrying a receiver."""

    receiver_type: str = Field(..., description="Receiver type name, pointer stripped")
    method_name: str
    line: int = Field(..., ge=0)
    file_path: str
    is_pointer: bool = False


class FileSymbols(BaseModel):
    """Symbols extracted from a single source file."""

    file_path: str
    package_name: str = ""
    interfaces: list[InterfaceDecl] = Field(default_factory=list)
    structs: list[StructDecl] = Field(default_factory=list)
    methods: list[MethodImpl] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.interfaces or self.structs or self.methods)


class PackageSymbolTable(BaseModel):
    """All declarations of one directory, the unit resolution runs over.

    Declarations are concatenated across files without deduplication; the
    same struct name declared twice keeps two entries.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Package directory")
    name: str = Field("", description="Go package name")
    interfaces: tuple[InterfaceDecl, ...] = ()
    structs: tuple[StructDecl, ...] = ()
    methods: tuple[MethodImpl, ...] = ()
    files: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not (self.interfaces or self.structs or self.methods)

    def interface_named(self, name: str) -> list[InterfaceDecl]:
        return [i for i in self.interfaces if i.name == name]

    def structs_named(self, name: str) -> list[StructDecl]:
        return [s for s in self.structs if s.name == name]

    def methods_of(self, receiver_type: str) -> list[MethodImpl]:
        return [m for m in self.methods if m.receiver_type == receiver_type]


class Satisfaction(BaseModel):
    """One recorded (interface, struct) satisfaction."""

    model_config = ConfigDict(frozen=True)

    interface: str
    struct: str
    reason: SatisfactionReason


class SatisfactionRelation(BaseModel):
    """Interface -> implementing structs, plus the reverse method index.

    ``method_index`` maps a method name to the (interface, struct) pairs in
    which the struct's own declaration of that method takes part.
    """

    model_config = ConfigDict(frozen=True)

    implementations: dict[str, list[str]] = Field(default_factory=dict)
    method_index: dict[str, list[tuple[str, str]]] = Field(default_factory=dict)
    satisfactions: list[Satisfaction] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.implementations

    def implementers(self, interface: str) -> list[str]:
        return list(self.implementations.get(interface, []))

    def interfaces_of(self, struct: str) -> list[str]:
        return sorted(
            iface for iface, structs in self.implementations.items() if struct in structs
        )

    def satisfies(self, struct: str, interface: str) -> bool:
        return struct in self.implementations.get(interface, [])

    def reason_for(self, interface: str, struct: str) -> SatisfactionReason | None:
        for sat in self.satisfactions:
            if sat.interface == interface and sat.struct == struct:
                return sat.reason
        return None


class Diagnostic(BaseModel):
    """Best-effort record of a degraded condition."""

    model_config = ConfigDict(frozen=True)

    path: str
    kind: DiagnosticKind
    message: str


class ResolutionResult(BaseModel):
    """Everything a resolve() query returns."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(..., description="Queried file")
    directory: str = Field(..., description="Package directory the file belongs to")
    status: ResolutionStatus = ResolutionStatus.OK
    table: PackageSymbolTable
    relation: SatisfactionRelation = Field(default_factory=SatisfactionRelation)
    diagnostics: list[Diagnostic] = Field(default_factory=list)


class Marker(BaseModel):
    """A line in a file taking part in a satisfaction."""

    model_config = ConfigDict(frozen=True)

    line: int
    kind: MarkerKind
    name: str


class JumpTarget(BaseModel):
    """Navigation destination."""

    model_config = ConfigDict(frozen=True)

    file_path: str
    line: int
    name: str


class FileEventKind(str, Enum):
    """File change notifications accepted from the host."""

    SAVED = "saved"
    CREATED = "created"
    DELETED = "deleted"
    RENAMED = "renamed"


class FileEvent(BaseModel):
    """A change notification; renames carry the new path."""

    kind: FileEventKind
    path: str
    new_path: str | None = None
