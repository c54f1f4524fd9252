"""Rich table builders used by the CLI.

Kept separate to reduce duplication and keep the command module smaller.
Line numbers are shown 1-based, as an editor displays them; files are shown
by name since every declaration of a package shares one directory.
"""

from __future__ import annotations

from pathlib import Path

from rich.table import Table

from ifacelens.core.models import JumpTarget, Marker, PackageSymbolTable, SatisfactionRelation


def build_implementations_table(relation: SatisfactionRelation) -> Table:
    """Build the (Interface, Implementer, Reason) table for `resolve`."""
    table = Table(show_header=True, title="Implementations")
    table.add_column("Interface", style="cyan")
    table.add_column("Implementer")
    table.add_column("Reason")
    for interface, structs in relation.implementations.items():
        for struct in structs:
            reason = relation.reason_for(interface, struct)
            table.add_row(interface, struct, reason.value if reason else "")
    return table


def build_method_index_table(relation: SatisfactionRelation) -> Table:
    """Build the reverse method index table."""
    table = Table(show_header=True, title="Method Index")
    table.add_column("Method", style="cyan")
    table.add_column("Interface")
    table.add_column("Implementer")
    for method, pairs in relation.method_index.items():
        for interface, struct in pairs:
            table.add_row(method, interface, struct)
    return table


def build_symbols_table(symbols: PackageSymbolTable) -> Table:
    """Build the declarations listing for `symbols`."""
    table = Table(show_header=True, title=f"Package {symbols.name or '?'}")
    table.add_column("Kind")
    table.add_column("Name", style="cyan")
    table.add_column("Detail")
    table.add_column("Location")

    for iface in symbols.interfaces:
        detail = ", ".join(iface.method_names)
        if iface.embedded_interface:
            detail = f"embeds {iface.embedded_interface}; {detail}".rstrip("; ")
        table.add_row("interface", iface.name, detail, _location(iface.file_path, iface.line))
    for struct in symbols.structs:
        embedded = [f.type_name for f in struct.embedded_fields]
        detail = f"embeds {', '.join(embedded)}" if embedded else ""
        table.add_row("struct", struct.name, detail, _location(struct.file_path, struct.line))
    for method in symbols.methods:
        receiver = f"*{method.receiver_type}" if method.is_pointer else method.receiver_type
        table.add_row(
            "method",
            method.method_name,
            f"receiver {receiver}",
            _location(method.file_path, method.line),
        )
    return table


def build_markers_table(markers: list[Marker]) -> Table:
    """Build the per-file marker listing for `markers`."""
    table = Table(show_header=True)
    table.add_column("Line")
    table.add_column("Kind")
    table.add_column("Name", style="cyan")
    for marker in markers:
        table.add_row(str(marker.line + 1), marker.kind.value, marker.name)
    return table


def build_targets_table(targets: list[JumpTarget], title: str) -> Table:
    """Build a jump target table."""
    table = Table(show_header=True, title=title)
    table.add_column("Name", style="cyan")
    table.add_column("File")
    table.add_column("Line")
    for target in targets:
        table.add_row(target.name, Path(target.file_path).name, str(target.line + 1))
    return table


def _location(file_path: str, line: int) -> str:
    return f"{Path(file_path).name}:{line + 1}"
