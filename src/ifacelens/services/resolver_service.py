"""Interface satisfaction resolution.

This module decides, for every (interface, struct) pair of a package, whether
the struct satisfies the interface. Satisfaction is by method name only and
is computed in four passes:

1. explicit assertions from comments and static assertions,
2. direct method-set coverage (value and pointer receivers merged),
3. bounded propagation through embedded fields,
4. reconciliation of receiver types only seen with pointer receivers.

The resolver is a pure function of a PackageSymbolTable snapshot.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from ifacelens.core.config import get_config
from ifacelens.core.models import (
    FieldDecl,
    PackageSymbolTable,
    Satisfaction,
    SatisfactionReason,
    SatisfactionRelation,
)

logger = logging.getLogger(__name__)


def coverage(required: Iterable[str], available: set[str]) -> float:
    """Fraction of required method names present in ``available``.

    An empty requirement has coverage 0.0 so empty interfaces are never
    structurally satisfied.
    """
    required = set(required)
    if not required:
        return 0.0
    return len(required & available) / len(required)


@dataclass
class _MergedStruct:
    """All declarations sharing one struct name, merged."""

    name: str
    fields: list[FieldDecl] = field(default_factory=list)
    explicit_interfaces: list[str] = field(default_factory=list)

    @property
    def embedded_types(self) -> list[str]:
        return [f.type_name for f in self.fields if f.embedded]


class _PackageIndex:
    """Name-keyed views over a package table, with the recorded pairs."""

    def __init__(self, table: PackageSymbolTable) -> None:
        self.interface_names: list[str] = []
        own_required: dict[str, set[str]] = {}
        embedded_of: dict[str, str] = {}
        for iface in table.interfaces:
            if iface.name not in own_required:
                self.interface_names.append(iface.name)
                own_required[iface.name] = set()
            own_required[iface.name].update(iface.method_names)
            if iface.embedded_interface and iface.name not in embedded_of:
                embedded_of[iface.name] = iface.embedded_interface

        self.required: dict[str, set[str]] = {
            name: self._expand(name, own_required, embedded_of) for name in self.interface_names
        }

        self.structs: dict[str, _MergedStruct] = {}
        for struct in table.structs:
            merged = self.structs.setdefault(struct.name, _MergedStruct(struct.name))
            merged.fields.extend(struct.fields)
            for iface in struct.explicit_interfaces:
                if iface not in merged.explicit_interfaces:
                    merged.explicit_interfaces.append(iface)

        self.value_methods: dict[str, set[str]] = {}
        self.pointer_methods: dict[str, set[str]] = {}
        self.receivers: list[str] = []
        for method in table.methods:
            if method.receiver_type not in self.value_methods:
                self.receivers.append(method.receiver_type)
                self.value_methods[method.receiver_type] = set()
                self.pointer_methods[method.receiver_type] = set()
            target = self.pointer_methods if method.is_pointer else self.value_methods
            target[method.receiver_type].add(method.method_name)

        self.records: dict[tuple[str, str], SatisfactionReason] = {}

    @staticmethod
    def _expand(
        name: str, own_required: dict[str, set[str]], embedded_of: dict[str, str]
    ) -> set[str]:
        """Own methods plus those of the embedded interface chain, cycle-safe."""
        methods: set[str] = set()
        seen: set[str] = set()
        current: str | None = name
        while current is not None and current in own_required and current not in seen:
            seen.add(current)
            methods |= own_required[current]
            current = embedded_of.get(current)
        return methods

    def own_methods(self, receiver: str) -> set[str]:
        """Value and pointer receiver method names merged."""
        return self.value_methods.get(receiver, set()) | self.pointer_methods.get(
            receiver, set()
        )

    def is_recorded(self, interface: str, struct: str) -> bool:
        return (interface, struct) in self.records

    def record(self, interface: str, struct: str, reason: SatisfactionReason) -> bool:
        if (interface, struct) in self.records:
            return False
        self.records[(interface, struct)] = reason
        return True

    def implementers(self) -> dict[str, set[str]]:
        result: dict[str, set[str]] = {}
        for iface, struct in self.records:
            result.setdefault(iface, set()).add(struct)
        return result


class ImplementationResolver:
    """Compute the interface -> implementing structs relation of a package."""

    def __init__(self, max_embedding_iterations: int | None = None) -> None:
        """Initialize the resolver.

        Args:
            max_embedding_iterations: Bound on embedding propagation rounds. A
                chain of embeddings resolves one level per round, so chains
                deeper than the bound are not resolved.
        """
        if max_embedding_iterations is None:
            max_embedding_iterations = get_config().max_embedding_iterations
        if max_embedding_iterations < 1:
            raise ValueError("max_embedding_iterations must be at least 1")
        self._max_iterations = max_embedding_iterations

    @property
    def max_embedding_iterations(self) -> int:
        return self._max_iterations

    def resolve(self, table: PackageSymbolTable) -> SatisfactionRelation:
        """Resolve which structs satisfy which interfaces.

        Args:
            table: Package symbol table snapshot

        Returns:
            SatisfactionRelation; empty when the table is empty
        """
        if table.is_empty:
            return SatisfactionRelation()

        index = _PackageIndex(table)
        self._explicit_pass(index)
        self._structural_pass(index)
        self._embedding_pass(index)
        self._pointer_receiver_pass(index)
        relation = self._build_relation(index)

        logger.debug(
            f"Resolved {table.path}: {len(relation.satisfactions)} satisfactions "
            f"over {len(index.interface_names)} interfaces"
        )
        return relation

    def _explicit_pass(self, index: _PackageIndex) -> None:
        """Honor asserted interfaces that are declared in the package."""
        for struct in index.structs.values():
            for iface in struct.explicit_interfaces:
                if iface in index.required:
                    index.record(iface, struct.name, SatisfactionReason.EXPLICIT)

    def _structural_pass(self, index: _PackageIndex) -> None:
        """Record every type whose own methods fully cover an interface.

        Besides declared structs this covers receiver types with no struct
        declaration (``type Celsius float64``) that have value receivers.
        Receivers seen only with pointer receivers are left to the
        reconciliation pass.
        """
        candidates = list(index.structs) + [
            name
            for name in index.receivers
            if name not in index.structs and index.value_methods[name]
        ]
        for iface in index.interface_names:
            required = index.required[iface]
            for name in candidates:
                if index.is_recorded(iface, name):
                    continue
                if coverage(required, index.own_methods(name)) == 1.0:
                    index.record(iface, name, SatisfactionReason.STRUCTURAL)

    def _embedding_pass(self, index: _PackageIndex) -> None:
        """Propagate satisfaction and promoted methods through embedded fields.

        Each round reads a snapshot of the previous one, so round k resolves
        embedding chains of depth k regardless of declaration order.
        """
        method_sets = {name: index.own_methods(name) for name in index.structs}

        for iteration in range(1, self._max_iterations + 1):
            implementers = index.implementers()
            snapshot = {name: set(methods) for name, methods in method_sets.items()}
            progress = False

            for struct in index.structs.values():
                for embedded in struct.embedded_types:
                    promoted = snapshot.get(embedded)
                    if promoted is None:
                        # Embedded interface, or a non-struct named type with methods
                        promoted = index.required.get(embedded) or index.own_methods(embedded)
                    if not promoted <= method_sets[struct.name]:
                        method_sets[struct.name] |= promoted
                        progress = True

                    for iface in index.interface_names:
                        if embedded == iface or embedded in implementers.get(iface, ()):
                            if index.record(iface, struct.name, SatisfactionReason.EMBEDDED):
                                progress = True

                for iface in index.interface_names:
                    if index.is_recorded(iface, struct.name):
                        continue
                    if coverage(index.required[iface], method_sets[struct.name]) == 1.0:
                        index.record(iface, struct.name, SatisfactionReason.EMBEDDED)
                        progress = True

            if not progress:
                logger.debug(f"Embedding propagation converged after {iteration} rounds")
                return

        logger.debug(f"Embedding propagation stopped at the {self._max_iterations}-round bound")

    def _pointer_receiver_pass(self, index: _PackageIndex) -> None:
        """Check receiver types that only ever appear with pointer receivers.

        These may have no struct declaration in the table (for example when
        the declaring file failed to parse).
        """
        pointer_only = [
            name
            for name in index.receivers
            if index.pointer_methods[name] and not index.value_methods[name]
        ]
        for name in pointer_only:
            methods = index.value_methods[name] | index.pointer_methods[name]
            for iface in index.interface_names:
                if index.is_recorded(iface, name):
                    continue
                if coverage(index.required[iface], methods) == 1.0:
                    index.record(iface, name, SatisfactionReason.POINTER_RECEIVER)

    @staticmethod
    def _build_relation(index: _PackageIndex) -> SatisfactionRelation:
        implementations: dict[str, list[str]] = {}
        method_index: dict[str, list[tuple[str, str]]] = {}

        for (iface, struct) in index.records:
            implementations.setdefault(iface, []).append(struct)
            for method in index.required[iface] & index.own_methods(struct):
                method_index.setdefault(method, []).append((iface, struct))

        satisfactions = [
            Satisfaction(interface=iface, struct=struct, reason=reason)
            for (iface, struct), reason in sorted(index.records.items())
        ]
        return SatisfactionRelation(
            implementations={k: sorted(v) for k, v in sorted(implementations.items())},
            method_index={k: sorted(v) for k, v in sorted(method_index.items())},
            satisfactions=satisfactions,
        )
