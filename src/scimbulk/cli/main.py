"""CLI entry point for scim-bulk.

Invoked as::

    scim-bulk [OPTIONS] COMMAND [ARGS]...

or, during development::

    python -m scimbulk.cli.main

Commands
--------
validate    Check a bulk request file for ordering and reference problems
convert     Re-emit a bulk request file as JSON or YAML
match       Evaluate a serialized filter against a resource
executors   List registered bulk executors
version     Show version information

Files ending in ``.yml`` / ``.yaml`` are read as YAML, anything else as
JSON.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any

import click
import yaml
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from scimbulk.errors import ScimBulkError

if TYPE_CHECKING:
    from scimbulk.bulk.request import BulkRequest

console = Console()
err_console = Console(stderr=True)

_YAML_SUFFIXES = {".yml", ".yaml"}


def _read_document(path: str) -> Any:
    """Read and decode a JSON or YAML file, exiting on error."""
    try:
        text = Path(path).read_text(encoding="utf-8")
    except FileNotFoundError:
        err_console.print(f"[red]Error:[/red] File not found: {path}")
        sys.exit(1)
    except OSError as exc:
        err_console.print(f"[red]Error:[/red] Cannot read {path}: {exc}")
        sys.exit(1)

    try:
        if Path(path).suffix.lower() in _YAML_SUFFIXES:
            return yaml.safe_load(text)
        return json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        err_console.print(f"[red]Syntax error[/red] in {path}: {exc}")
        sys.exit(1)


def _load_request_or_exit(path: str) -> "BulkRequest":
    """Load a bulk request, printing the problem and exiting on failure."""
    from scimbulk.bulk.serializer import BulkSerializer

    document = _read_document(path)
    try:
        return BulkSerializer().from_dict(document)
    except ScimBulkError as exc:
        err_console.print(f"[red]Invalid bulk request[/red] in {path}: {exc}")
        sys.exit(1)


def _severity_color(severity_name: str) -> str:
    """Map a DiagnosticSeverity name to a Rich color string."""
    colors = {
        "ERROR": "red",
        "WARNING": "yellow",
        "INFORMATION": "blue",
        "HINT": "dim",
    }
    return colors.get(severity_name, "white")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="scim-bulk")
def cli() -> None:
    """SCIM 2.0 bulk request and filter toolkit."""


# ---------------------------------------------------------------------------
# version command
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from scimbulk import __version__

    table = Table(show_header=False, box=None)
    table.add_row("[bold]scim-bulk[/bold]", f"v{__version__}")
    table.add_row("Python", f"{sys.version_info.major}.{sys.version_info.minor}.{sys.version_info.micro}")
    table.add_row("Platform", sys.platform)
    console.print(table)


# ---------------------------------------------------------------------------
# executors command
# ---------------------------------------------------------------------------


@cli.command(name="executors")
def executors_command() -> None:
    """List bulk executors registered directly or through entry-points."""
    from scimbulk.bulk.executor import executor_registry

    executor_registry.load_entrypoints()
    names = executor_registry.list_plugins()
    if not names:
        console.print("[bold]Registered executors:[/bold]")
        console.print("  (No executors registered. Install an executor package to see entries here.)")
        return

    table = Table(title="Registered executors")
    table.add_column("Name", style="bold")
    table.add_column("Class")
    for name in names:
        cls = executor_registry.get(name)
        table.add_row(name, f"{cls.__module__}.{cls.__qualname__}")
    console.print(table)


# ---------------------------------------------------------------------------
# validate command
# ---------------------------------------------------------------------------


@cli.command(name="validate")
@click.argument("file", type=click.Path(exists=False))
@click.option("--strict", is_flag=True, default=False, help="Treat warnings as errors")
@click.option(
    "--max-operations",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of operations the service accepts",
)
@click.option(
    "--max-payload-size",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum request size in bytes the service accepts",
)
def validate_command(
    file: str, strict: bool, max_operations: int | None, max_payload_size: int | None
) -> None:
    """Check a bulk request for ordering and reference problems.

    FILE is the path to a JSON or YAML bulk request.
    """
    from scimbulk.bulk.validator import BulkLimits, BulkValidator

    request = _load_request_or_exit(file)
    limits = BulkLimits(max_operations=max_operations, max_payload_size=max_payload_size)
    diagnostics = BulkValidator(strict=strict, limits=limits).validate(request)

    if not diagnostics:
        console.print(f"[green]OK[/green] {file} — {len(request)} operation(s), no issues found")
        sys.exit(0)

    errors = [d for d in diagnostics if d.is_error]
    warnings = [d for d in diagnostics if not d.is_error]

    table = Table(title=f"Validation: {file}", show_lines=True)
    table.add_column("Severity", style="bold", min_width=10)
    table.add_column("Code", min_width=8)
    table.add_column("Location", min_width=12)
    table.add_column("Message")

    for d in diagnostics:
        color = _severity_color(d.severity.name)
        table.add_row(
            f"[{color}]{d.severity.name}[/{color}]",
            d.code,
            d.location,
            d.message + (f"\n[dim]hint: {d.suggestion}[/dim]" if d.suggestion else ""),
        )

    console.print(table)
    console.print(
        f"\n[bold]Summary:[/bold] {len(errors)} error(s), {len(warnings)} other finding(s)"
    )

    if errors:
        sys.exit(1)


# ---------------------------------------------------------------------------
# convert command
# ---------------------------------------------------------------------------


@cli.command(name="convert")
@click.argument("file", type=click.Path(exists=False))
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["json", "yaml"], case_sensitive=False),
    default="json",
    help="Output format",
)
@click.option("--output", "-o", default=None, help="Output file path (defaults to stdout)")
def convert_command(file: str, output_format: str, output: str | None) -> None:
    """Load a bulk request and write it back in canonical wire form.

    FILE is the path to a JSON or YAML bulk request.
    """
    from scimbulk.bulk.serializer import BulkSerializer

    request = _load_request_or_exit(file)
    serializer = BulkSerializer()

    if output_format.lower() == "json":
        text = serializer.to_json(request, indent=2)
        lang = "json"
    else:
        text = serializer.to_yaml(request)
        lang = "yaml"

    if output:
        Path(output).write_text(text, encoding="utf-8")
        console.print(f"[green]Bulk request written to[/green] {output}")
    else:
        syntax = Syntax(text, lang, line_numbers=True)
        console.print(syntax)


# ---------------------------------------------------------------------------
# match command
# ---------------------------------------------------------------------------


@cli.command(name="match")
@click.argument("filter_file", type=click.Path(exists=False))
@click.argument("resource_file", type=click.Path(exists=False))
@click.option("--case-exact", is_flag=True, default=False, help="Compare strings case-sensitively")
def match_command(filter_file: str, resource_file: str, case_exact: bool) -> None:
    """Evaluate a serialized filter against a resource.

    FILTER_FILE holds a filter tree in its dict form; RESOURCE_FILE holds
    a SCIM resource.  Exits 0 on a match and 1 otherwise.
    """
    from scimbulk.filters.evaluator import FilterEvaluator
    from scimbulk.filters.serializer import FilterSerializer

    try:
        node = FilterSerializer().from_dict(_read_document(filter_file))
    except ScimBulkError as exc:
        err_console.print(f"[red]Invalid filter[/red] in {filter_file}: {exc}")
        sys.exit(1)

    resource = _read_document(resource_file)
    if not isinstance(resource, dict):
        err_console.print(f"[red]Error:[/red] {resource_file} does not hold a JSON object")
        sys.exit(1)

    try:
        matched = FilterEvaluator(case_exact=case_exact).matches(node, resource)
    except ScimBulkError as exc:
        err_console.print(f"[red]Evaluation error:[/red] {exc}")
        sys.exit(1)

    if matched:
        console.print(f"[green]MATCH[/green] {node}")
        sys.exit(0)
    console.print(f"[yellow]NO MATCH[/yellow] {node}")
    sys.exit(1)


if __name__ == "__main__":
    cli()
