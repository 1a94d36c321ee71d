"""Render resolution snapshots for humans (rich tables) or machines (orjson).

Flushes pending log output first so log lines never interleave with the
report.
"""

from __future__ import annotations

import lib_log_rich.runtime
import orjson
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from optstack.application.resolution import Resolution
from optstack.domain.enums import OutputFormat


def render_json(resolution: Resolution) -> str:
    """Return the resolution as indented JSON with sorted keys.

    Example:
        >>> print(render_json(Resolution("tool", "tool [<options>]")))
        {
          "command": "tool",
          "invocation": "tool [<options>]",
          "values": {},
          "warnings": []
        }
    """
    return orjson.dumps(resolution.as_dict(), option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS).decode("utf-8")


def _flag(value: bool) -> str:
    return "yes" if value else ""


def build_table(resolution: Resolution) -> Table:
    """Return a rich table with one row per resolved name."""
    table = Table(title=resolution.invocation, title_justify="left")
    table.add_column("Name", style="bold cyan", no_wrap=True)
    table.add_column("Value", overflow="fold")
    table.add_column("Source", style="magenta", overflow="fold")
    table.add_column("Supplied", justify="center")
    table.add_column("Changed", justify="center")
    for item in resolution.values:
        name = f"<{item.name}>" if item.positional else f"--{item.name}"
        table.add_row(name, item.value, item.source, _flag(item.supplied), _flag(item.changed))
    return table


def display_resolution(
    resolution: Resolution,
    *,
    output_format: OutputFormat = OutputFormat.HUMAN,
    console: Console | None = None,
) -> None:
    """Print a resolution snapshot to stdout.

    Args:
        resolution: Snapshot produced by :func:`~optstack.application.resolution.resolve_all`.
        output_format: HUMAN for a table plus warnings, JSON for a single document.
        console: Optional Rich Console for output, mainly for tests.
    """
    if lib_log_rich.runtime.is_initialised():
        lib_log_rich.runtime.flush()

    target = console if console is not None else Console()
    if output_format is OutputFormat.JSON:
        target.out(render_json(resolution), highlight=False)
        return

    target.print(build_table(resolution))
    for warning in resolution.warnings:
        target.print(f"[yellow]Warning:[/yellow] {escape(warning)}", markup=True, highlight=False)


__all__ = [
    "build_table",
    "display_resolution",
    "render_json",
]
