"""Validate option files against a schema.

Contents:
    * :func:`cli_check` - Parse each file and report problems.
"""

from __future__ import annotations

import logging
from pathlib import Path

import lib_log_rich.runtime
import rich_click as click

from optstack.domain.errors import OptionError

from ..constants import CLICK_CONTEXT_SETTINGS
from ..context import get_cli_context
from ..exit_codes import ExitCode
from ._shared import exit_code_for, load_option_file, require_schema, schema_config

logger = logging.getLogger(__name__)


@click.command("check", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--schema",
    "schema_path",
    type=click.Path(path_type=Path, dir_okay=False),
    required=True,
    help="TOML schema describing the program's commands and options",
)
@click.option(
    "--loose-files/--strict-files",
    "loose_files",
    default=None,
    help="Skip unknown options instead of reporting them; defaults to [optstack].loose_file_options",
)
@click.argument("files", nargs=-1, required=True, type=click.Path(path_type=Path, dir_okay=False))
@click.pass_context
def cli_check(ctx: click.Context, schema_path: Path, loose_files: bool | None, files: tuple[Path, ...]) -> None:
    """Parse every FILE against the schema, reporting each one as ok or failed.

    Options of any command in the schema are accepted in any file. All files
    are checked; the exit code reflects the first failure.
    """
    cli_ctx = get_cli_context(ctx)
    loose = cli_ctx.settings.loose_file_options if loose_files is None else loose_files
    root = require_schema(cli_ctx.services.load_schema, schema_path)
    config = schema_config(root, loose_file_options=loose)

    first_failure: ExitCode | None = None
    with lib_log_rich.runtime.bind(job_id="cli-check", extra={"command": "check", "files": len(files)}):
        for path in files:
            try:
                option_file = load_option_file(path, config)
            except FileNotFoundError:
                click.echo(f"FAIL {path}: file not found", err=True)
                first_failure = first_failure or ExitCode.FILE_NOT_FOUND
                continue
            except OptionError as exc:
                click.echo(f"FAIL {path}: {exc}", err=True)
                first_failure = first_failure or exit_code_for(exc)
                continue

            names = [section.name for section in option_file.sections if section.name]
            label = f"sections: {', '.join(names)}" if names else "no sections"
            click.echo(f"ok   {path} ({label})")
            for warning in option_file.deprecation_warnings():
                click.echo(f"     warning: {warning}")

    if first_failure is not None:
        logger.warning("Option file check failed", extra={"exit_code": int(first_failure)})
        raise SystemExit(first_failure)


__all__ = ["cli_check"]
