"""Resolve a program's options the way it would see them at runtime.

Contents:
    * :func:`cli_resolve` - Layer option files under a forwarded command line.
"""

from __future__ import annotations

import logging
from pathlib import Path

import lib_log_rich.runtime
import rich_click as click

from optstack.application.dispatch import handle_command, requests_builtin
from optstack.application.resolution import resolve_all
from optstack.domain.cmdline import parse_cli
from optstack.domain.enums import OutputFormat
from optstack.domain.errors import OptionError

from ..constants import PASSTHROUGH_CONTEXT_SETTINGS
from ..context import get_cli_context
from ..exit_codes import ExitCode
from ._shared import exit_code_for, fail, load_option_file, require_schema

logger = logging.getLogger(__name__)


@click.command("resolve", context_settings=PASSTHROUGH_CONTEXT_SETTINGS)
@click.option(
    "--schema",
    "schema_path",
    type=click.Path(path_type=Path, dir_okay=False),
    required=True,
    help="TOML schema describing the program's commands and options",
)
@click.option(
    "--file",
    "files",
    type=click.Path(path_type=Path, dir_okay=False),
    multiple=True,
    help="Option file to layer under the command line; later files win (repeatable)",
)
@click.option(
    "--section",
    "sections",
    multiple=True,
    help="Option file section to use, highest priority first (repeatable)",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([f.value for f in OutputFormat], case_sensitive=False),
    default=None,
    help="Output format; defaults to [optstack].output_format",
)
@click.option(
    "--loose-files/--strict-files",
    "loose_files",
    default=None,
    help="Skip unknown options in option files; defaults to [optstack].loose_file_options",
)
@click.argument("argv", nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def cli_resolve(
    ctx: click.Context,
    schema_path: Path,
    files: tuple[Path, ...],
    sections: tuple[str, ...],
    output_format: str | None,
    loose_files: bool | None,
    argv: tuple[str, ...],
) -> None:
    """Show every option's value, winning source and supplied/changed state.

    Arguments after ``--`` are the command line of the described program,
    without the program name. Help and version requests for that program are
    answered instead of resolving.

    Example:
        optstack resolve --schema tool.toml --file tool.cnf -- push --dry-run prod
    """
    cli_ctx = get_cli_context(ctx)
    settings = cli_ctx.settings
    fmt = OutputFormat(output_format.lower()) if output_format else settings.output_format
    loose = settings.loose_file_options if loose_files is None else loose_files

    root = require_schema(cli_ctx.services.load_schema, schema_path)
    extra = {"command": "resolve", "schema": str(schema_path), "files": len(files)}
    with lib_log_rich.runtime.bind(job_id="cli-resolve", extra=extra):
        try:
            config = parse_cli(root, [root.name, *argv])
            if requests_builtin(config):
                handle_command(config, click.echo)
                return
            config.loose_file_options = loose
            for path in files:
                config.add_source(load_option_file(path, config, sections))
            resolution = resolve_all(config)
        except FileNotFoundError as exc:
            fail(f"Option file not found: {exc.filename}", ExitCode.FILE_NOT_FOUND)
        except OptionError as exc:
            fail(str(exc), exit_code_for(exc))

        for warning in resolution.warnings:
            logger.warning(warning)
        logger.info("Resolved %d values for %s", len(resolution.values), resolution.command)
        cli_ctx.services.display_resolution(resolution, output_format=fmt)


__all__ = ["cli_resolve"]
