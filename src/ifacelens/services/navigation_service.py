"""Navigation data derived from a resolution result.

Turns a package table and its satisfaction relation into the per-file
markers and jump targets a front-end needs to decorate lines and move between
interfaces and their implementations. Nothing here touches an editor.
"""

from __future__ import annotations

from ifacelens.core.models import (
    InterfaceDecl,
    JumpTarget,
    Marker,
    MarkerKind,
    MethodSignature,
    ResolutionResult,
    Satisfaction,
    SatisfactionReason,
)
from ifacelens.services.cache_service import normalize_path


class NavigationService:
    """Markers and jump targets over one resolution result."""

    def __init__(self, result: ResolutionResult) -> None:
        self._result = result
        self._table = result.table
        self._relation = result.relation

    @staticmethod
    def _same_file(a: str, b: str) -> bool:
        return normalize_path(a) == normalize_path(b)

    def _interface_method(self, interface: str, method: str) -> MethodSignature | None:
        """Find where ``interface`` (or an interface it embeds) declares ``method``."""
        seen: set[str] = set()
        current: str | None = interface
        while current is not None and current not in seen:
            seen.add(current)
            decls = self._table.interface_named(current)
            for decl in decls:
                for signature in decl.methods:
                    if signature.name == method:
                        return signature
            current = next((d.embedded_interface for d in decls if d.embedded_interface), None)
        return None

    def _struct_targets(self, struct: str) -> list[JumpTarget]:
        decls = self._table.structs_named(struct)
        if decls:
            return [JumpTarget(file_path=d.file_path, line=d.line, name=d.name) for d in decls]
        # Receiver without a struct declaration: point at its methods
        return [
            JumpTarget(file_path=m.file_path, line=m.line, name=f"{struct}.{m.method_name}")
            for m in self._table.methods_of(struct)
        ]

    def markers(self, file_path: str) -> list[Marker]:
        """Lines of ``file_path`` taking part in a satisfaction.

        Interfaces with at least one implementer mark their definition and
        method lines; satisfying structs mark their definition and the
        methods listed in the reverse method index.

        Args:
            file_path: File to decorate

        Returns:
            Markers sorted by line, one per line
        """
        by_line: dict[int, Marker] = {}

        def add(line: int, kind: MarkerKind, name: str) -> None:
            by_line.setdefault(line, Marker(line=line, kind=kind, name=name))

        implemented = set(self._relation.implementations)
        for iface in self._table.interfaces:
            if iface.name not in implemented or not self._same_file(iface.file_path, file_path):
                continue
            add(iface.line, MarkerKind.INTERFACE, iface.name)
            for signature in iface.methods:
                add(signature.line, MarkerKind.INTERFACE, signature.name)

        satisfiers = {
            struct for structs in self._relation.implementations.values() for struct in structs
        }
        for struct in self._table.structs:
            if struct.name in satisfiers and self._same_file(struct.file_path, file_path):
                add(struct.line, MarkerKind.IMPLEMENTATION, struct.name)

        for method in self._table.methods:
            if not self._same_file(method.file_path, file_path):
                continue
            pairs = self._relation.method_index.get(method.method_name, [])
            if any(struct == method.receiver_type for _, struct in pairs):
                add(method.line, MarkerKind.IMPLEMENTATION, method.method_name)

        return [by_line[line] for line in sorted(by_line)]

    def implementation_targets(self, file_path: str, line: int) -> list[JumpTarget]:
        """Jump from an interface (or interface method) line to implementations.

        Args:
            file_path: File containing the line
            line: 0-based line as recorded on declarations

        Returns:
            Implementing structs for an interface line, implementing methods
            for an interface method line, otherwise an empty list
        """
        targets: list[JumpTarget] = []
        for iface in self._table.interfaces:
            if not self._same_file(iface.file_path, file_path):
                continue
            implementers = self._relation.implementers(iface.name)
            if iface.line == line:
                for struct in implementers:
                    targets.extend(self._struct_targets(struct))
            for signature in iface.methods:
                if signature.line != line:
                    continue
                for pair_iface, struct in self._relation.method_index.get(signature.name, []):
                    if pair_iface != iface.name:
                        continue
                    targets.extend(
                        JumpTarget(
                            file_path=m.file_path,
                            line=m.line,
                            name=f"{struct}.{m.method_name}",
                        )
                        for m in self._table.methods_of(struct)
                        if m.method_name == signature.name
                    )
        return _unique(targets)

    def interface_targets(self, file_path: str, line: int) -> list[JumpTarget]:
        """Jump from a struct (or implementing method) line back to interfaces.

        Args:
            file_path: File containing the line
            line: 0-based line as recorded on declarations

        Returns:
            Satisfied interfaces for a struct line, the matching interface
            methods for a method line, otherwise an empty list
        """
        targets: list[JumpTarget] = []
        for struct in self._table.structs:
            if struct.line == line and self._same_file(struct.file_path, file_path):
                for iface in self._relation.interfaces_of(struct.name):
                    targets.extend(_interface_targets(self._table.interface_named(iface)))

        for method in self._table.methods:
            if method.line != line or not self._same_file(method.file_path, file_path):
                continue
            for iface, struct in self._relation.method_index.get(method.method_name, []):
                if struct != method.receiver_type:
                    continue
                signature = self._interface_method(iface, method.method_name)
                if signature is not None:
                    targets.append(
                        JumpTarget(
                            file_path=signature.file_path,
                            line=signature.line,
                            name=f"{iface}.{signature.name}",
                        )
                    )
        return _unique(targets)

    def explicit_implementations(self) -> dict[str, list[Satisfaction]]:
        """Satisfactions established by explicit assertions, by interface."""
        result: dict[str, list[Satisfaction]] = {}
        for sat in self._relation.satisfactions:
            if sat.reason == SatisfactionReason.EXPLICIT:
                result.setdefault(sat.interface, []).append(sat)
        return result


def _interface_targets(decls: list[InterfaceDecl]) -> list[JumpTarget]:
    return [JumpTarget(file_path=d.file_path, line=d.line, name=d.name) for d in decls]


def _unique(targets: list[JumpTarget]) -> list[JumpTarget]:
    seen: set[tuple[str, int, str]] = set()
    unique: list[JumpTarget] = []
    for target in targets:
        key = (target.file_path, target.line, target.name)
        if key not in seen:
            seen.add(key)
            unique.append(target)
    return sorted(unique, key=lambda t: (t.file_path, t.line, t.name))
