"""Root CLI command group and global option handling.

Contents:
    * :func:`cli` - Root command group with ``--traceback`` and ``--profile``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import rich_click as click
from pydantic import ValidationError

from optstack import __init__conf__
from optstack.adapters.config.settings import load_tool_settings

from .constants import CLICK_CONTEXT_SETTINGS
from .context import apply_traceback_preferences, store_cli_context

if TYPE_CHECKING:
    from optstack.composition import AppServices


@click.group(
    help=__init__conf__.title,
    context_settings=CLICK_CONTEXT_SETTINGS,
    invoke_without_command=True,
)
@click.version_option(
    version=__init__conf__.version,
    prog_name=__init__conf__.shell_command,
    message=f"{__init__conf__.shell_command} version {__init__conf__.version}",
)
@click.option(
    "--traceback/--no-traceback",
    is_flag=True,
    default=False,
    help="Show full Python traceback on errors",
)
@click.option(
    "--profile",
    type=str,
    default=None,
    help="Load configuration from a named profile (e.g., 'production', 'test')",
)
@click.pass_context
def cli(ctx: click.Context, traceback: bool, profile: str | None) -> None:
    """Load the tool's configuration once and share it with every subcommand.

    Logging is initialized from the loaded configuration before any
    subcommand runs, and the traceback flag is mirrored into
    ``lib_cli_exit_tools.config``.
    """
    # ctx.obj is the services factory (production or test)
    if not callable(ctx.obj):
        raise RuntimeError("Services factory not provided. This is a bug.")
    services: AppServices = ctx.obj()  # type: ignore[assignment]  # Click's obj is typed as Any
    try:
        config = services.get_config(profile=profile)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--profile") from exc
    services.init_logging(config)
    try:
        settings = load_tool_settings(config)
    except ValidationError as exc:
        raise click.UsageError(f"Invalid [optstack] configuration: {exc}") from exc
    store_cli_context(
        ctx,
        traceback=traceback,
        config=config,
        services=services,
        settings=settings,
        profile=profile,
    )
    apply_traceback_preferences(traceback)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# commands import from package ancestors, so registration is deferred until cli exists
def _register_commands() -> None:
    from .commands import cli_check, cli_config, cli_info, cli_normalize, cli_resolve

    for cmd in (cli_info, cli_config, cli_resolve, cli_check, cli_normalize):
        cli.add_command(cmd)


_register_commands()


__all__ = ["cli"]
