"""Rich/JSON output helpers.

The CLI renders ServiceResult for humans (Rich output, colors) or
machines (--json). The formatter layer adapts ServiceResult to the
requested output mode.
"""

from __future__ import annotations

import json as _json
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from rich.table import Table
from rich.text import Text

from shutterlog.output.console import create_console, get_output

if TYPE_CHECKING:
    from rich.console import Console

    from shutterlog.services.result import ServiceResult


@dataclass(frozen=True)
class OutputSettings:
    """Output mode flags resolved from the root CLI options."""

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False


def format_result(result: ServiceResult, *, settings: OutputSettings | None = None) -> str:
    """Format a ServiceResult for display.

    ``--json`` wins over ``--quiet``; quiet output is one status line.
    """
    settings = settings or OutputSettings()
    if settings.json_output:
        return result.model_dump_json(indent=2)
    if settings.quiet:
        return _format_quiet(result)

    console = create_console()
    if result.ok:
        _render_ok(console, result, verbose=settings.verbose)
    else:
        _render_error(console, result, verbose=settings.verbose)
    return get_output(console).rstrip("\n")


def _format_quiet(result: ServiceResult) -> str:
    if result.ok:
        return f"OK: {result.op}"
    msg = result.error.message if result.error else "Unknown error"
    return f"ERROR: {result.op}: {msg}"


def _render_ok(console: Console, result: ServiceResult, *, verbose: bool) -> None:
    console.print(Text("OK", style="sl.ok") + Text(f"  {result.op}", style="sl.op"))
    collections = result.data.get("collections")
    for key, value in result.data.items():
        if key == "collections":
            continue
        _field(console, key, value)
    if isinstance(collections, dict) and collections:
        table = Table(show_header=True, header_style="sl.key", box=None, padding=(0, 2))
        table.add_column("collection")
        table.add_column("items", justify="right", style="sl.count")
        for name in sorted(collections):
            table.add_row(name, str(collections[name]))
        console.print(table)
    if verbose and result.meta:
        console.print(Text("  meta:", style="dim"))
        for key, value in result.meta.items():
            console.print(Text(f"    {key}: {value}"))


def _render_error(console: Console, result: ServiceResult, *, verbose: bool) -> None:
    error = result.error
    message = error.message if error else "Unknown error"
    code = f" [{error.code}]" if error else ""
    console.print(
        Text("ERROR", style="sl.error")
        + Text(f"  {result.op}{code}", style="sl.op")
        + Text(f"  {message}")
    )
    if verbose and error and error.detail:
        for key, value in error.detail.items():
            _field(console, key, value)


def _field(console: Console, key: str, value: Any) -> None:
    """Print a single indented key-value field."""
    if isinstance(value, (dict, list)):
        value = _json.dumps(value, separators=(",", ":"))
    style = "sl.path" if key.endswith(("_dir", "path", "url")) else ""
    console.print(Text(f"  {key}: ", style="sl.key") + Text(str(value), style=style))
