"""ifacelens CLI - Go interface implementation lens.

This module provides the command-line interface for ifacelens, enabling
one-shot resolution of a package, symbol listings, and the marker and jump
target queries an editor integration would issue.
"""

from __future__ import annotations

import logging
import traceback
from pathlib import Path
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

from ifacelens.core.models import ResolutionResult, ResolutionStatus

# Load environment variables from .env file
load_dotenv()

app = typer.Typer(
    name="ifacelens",
    help="Resolve which Go structs implement which interfaces",
    no_args_is_help=True,
)

# Rich console for formatted output
console = Console()
err_console = Console(stderr=True)

# Global verbose flag
_verbose: bool = False

GoFile = Annotated[
    Path,
    typer.Argument(
        help="Go source file",
        exists=True,
        file_okay=True,
        dir_okay=False,
        resolve_path=True,
    ),
]


def set_verbose(verbose: bool) -> None:
    """Set global verbose mode."""
    global _verbose
    _verbose = verbose


def print_exception(e: Exception) -> None:
    """Print exception details in verbose mode."""
    if _verbose:
        err_console.print("\n[dim]--- Traceback (verbose mode) ---[/dim]")
        err_console.print(f"[dim]{traceback.format_exc()}[/dim]")


@app.callback()
def main_callback(
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging and full tracebacks"),
    ] = False,
) -> None:
    """ifacelens CLI - Go interface implementation lens."""
    set_verbose(verbose)
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(message)s",
            handlers=[RichHandler(console=err_console, show_path=False)],
            force=True,
        )


def get_client():
    """Create a client from the current configuration."""
    from ifacelens.client import IfaceLensClient
    from ifacelens.core.config import IfaceLensConfig

    try:
        return IfaceLensClient(IfaceLensConfig())
    except Exception as e:
        err_console.print(f"[red]Error:[/red] Invalid configuration: {e}")
        err_console.print("[yellow]Hint:[/yellow] Check IFACELENS_* environment variables")
        print_exception(e)
        raise typer.Exit(1)


def resolve_or_exit(path: Path) -> ResolutionResult:
    """Resolve ``path`` and stop on results that carry no usable data."""
    result = get_client().resolve(path)

    for diagnostic in result.diagnostics:
        err_console.print(
            f"[yellow]Warning:[/yellow] {diagnostic.kind.value}: {diagnostic.path}: "
            f"{diagnostic.message}"
        )

    if result.status == ResolutionStatus.TOOLCHAIN_UNAVAILABLE:
        err_console.print("[red]Error:[/red] Go grammar is not available")
        err_console.print("[yellow]Hint:[/yellow] Install tree-sitter-go")
        raise typer.Exit(1)
    if result.status == ResolutionStatus.ERROR:
        err_console.print(f"[red]Error:[/red] Failed to resolve {path}")
        raise typer.Exit(1)
    return result


@app.command()
def resolve(
    path: GoFile,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output machine-readable JSON"),
    ] = False,
) -> None:
    """Resolve interface implementations for the package of a file.

    Example:
        ifacelens resolve ./pkg/io/reader.go
        ifacelens resolve ./pkg/io/reader.go --json
    """
    from ifacelens.cli._tables import build_implementations_table, build_method_index_table
    from ifacelens.core.serializer import SerializationError, serialize

    result = resolve_or_exit(path)

    if json_output:
        try:
            typer.echo(serialize(result))
        except SerializationError as e:
            err_console.print(f"[red]Error:[/red] {e.message}: {e.details}")
            print_exception(e)
            raise typer.Exit(1)
        return

    console.print(f"[blue]Package:[/blue] {result.table.name or '?'} ({result.directory})")
    console.print(f"  Files: {len(result.table.files)}")

    if result.relation.is_empty:
        console.print("[yellow]No implementations found[/yellow]")
        return

    console.print(build_implementations_table(result.relation))
    if result.relation.method_index:
        console.print(build_method_index_table(result.relation))


@app.command()
def symbols(path: GoFile) -> None:
    """List the declarations of the package containing a file.

    Example:
        ifacelens symbols ./pkg/io/reader.go
    """
    from ifacelens.cli._tables import build_symbols_table

    result = resolve_or_exit(path)
    if result.table.is_empty:
        console.print("[yellow]No declarations found[/yellow]")
        return
    console.print(build_symbols_table(result.table))


@app.command()
def markers(path: GoFile) -> None:
    """Show the lines of a file that take part in an implementation.

    Example:
        ifacelens markers ./pkg/io/reader.go
    """
    from ifacelens.cli._tables import build_markers_table
    from ifacelens.services.navigation_service import NavigationService

    result = resolve_or_exit(path)
    found = NavigationService(result).markers(str(path))
    if not found:
        console.print("[yellow]No markers in this file[/yellow]")
        return
    console.print(build_markers_table(found))


@app.command()
def targets(
    path: GoFile,
    line: Annotated[int, typer.Argument(help="1-based line number", min=1)],
) -> None:
    """Show jump targets for a line: implementations of an interface, or
    interfaces satisfied by a struct.

    Example:
        ifacelens targets ./pkg/io/reader.go 12
    """
    from ifacelens.cli._tables import build_targets_table
    from ifacelens.services.navigation_service import NavigationService

    result = resolve_or_exit(path)
    navigation = NavigationService(result)
    row = line - 1

    implementations = navigation.implementation_targets(str(path), row)
    interfaces = navigation.interface_targets(str(path), row)

    if implementations:
        console.print(build_targets_table(implementations, "Implementations"))
    if interfaces:
        console.print(build_targets_table(interfaces, "Interfaces"))
    if not implementations and not interfaces:
        console.print(f"[yellow]No targets at line {line}[/yellow]")


if __name__ == "__main__":
    app()
