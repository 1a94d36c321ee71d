"""Rewrite an option file in canonical form.

Contents:
    * :func:`cli_normalize` - Parse a file and write its canonical rendering.
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
from ._shared import exit_code_for, fail, load_option_file, require_schema, schema_config

logger = logging.getLogger(__name__)


@click.command("normalize", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option(
    "--schema",
    "schema_path",
    type=click.Path(path_type=Path, dir_okay=False),
    required=True,
    help="TOML schema describing the program's commands and options",
)
@click.option(
    "--output",
    "output_path",
    type=click.Path(path_type=Path, dir_okay=False),
    required=True,
    help="Where to write the canonical file",
)
@click.option("--force", is_flag=True, default=False, help="Overwrite OUTPUT if it exists")
@click.argument("source", type=click.Path(path_type=Path, dir_okay=False))
@click.pass_context
def cli_normalize(ctx: click.Context, schema_path: Path, output_path: Path, force: bool, source: Path) -> None:
    """Write SOURCE to OUTPUT with sorted keys, canonical booleans and no comments.

    Unknown options are dropped when loose file options are enabled, and
    rejected otherwise.
    """
    cli_ctx = get_cli_context(ctx)
    root = require_schema(cli_ctx.services.load_schema, schema_path)
    config = schema_config(root, loose_file_options=cli_ctx.settings.loose_file_options)

    extra = {"command": "normalize", "source": str(source), "output": str(output_path)}
    with lib_log_rich.runtime.bind(job_id="cli-normalize", extra=extra):
        try:
            option_file = load_option_file(source, config)
        except FileNotFoundError:
            fail(f"Option file not found: {source}", ExitCode.FILE_NOT_FOUND)
        except OptionError as exc:
            fail(str(exc), exit_code_for(exc))

        target = option_file.copy_to(output_path)
        if not target.render():
            click.echo(f"Nothing to write: {source} sets no options")
            return
        try:
            target.write(overwrite=force)
        except FileExistsError:
            fail(f"{output_path} already exists; use --force to overwrite", ExitCode.FILE_EXISTS)
        logger.info("Normalized option file", extra={"source": str(source), "output": str(output_path)})
        click.echo(f"Wrote {output_path}")


__all__ = ["cli_normalize"]
