"""Shared helpers for the schema-driven commands.

Internal module providing the error-to-exit-code mapping and the schema and
option-file loading steps used by ``resolve``, ``check`` and ``normalize``.

Contents:
    * :func:`exit_code_for` - Map an option error to an :class:`ExitCode`.
    * :func:`fail` - Print an error and exit with a code.
    * :func:`require_schema` - Load a schema or exit.
    * :func:`schema_config` - Config for parsing files against a whole schema.
    * :func:`load_option_file` - Parse one option file against a Config.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import NoReturn

import rich_click as click

from optstack.adapters.optionfile import OptionFile
from optstack.adapters.schema import SchemaError
from optstack.application.ports import LoadSchema
from optstack.domain.cmdline import CLI_SOURCE_LABEL, CommandLine
from optstack.domain.command import Command
from optstack.domain.config import Config
from optstack.domain.errors import (
    FileParseFormatError,
    MissingSectionError,
    OptionError,
    OptionMissingValueError,
    OptionNotDefinedError,
)

from ..exit_codes import ExitCode

logger = logging.getLogger(__name__)


def exit_code_for(exc: OptionError) -> ExitCode:
    """Return CONFIG_ERROR for problems inside option files, else INVALID_ARGUMENT.

    Example:
        >>> exit_code_for(OptionNotDefinedError("x", "CLI")).name
        'INVALID_ARGUMENT'
        >>> exit_code_for(OptionNotDefinedError("x", "/etc/tool.cnf line 2")).name
        'CONFIG_ERROR'
    """
    if isinstance(exc, (FileParseFormatError, MissingSectionError)):
        return ExitCode.CONFIG_ERROR
    if isinstance(exc, (OptionNotDefinedError, OptionMissingValueError)) and exc.source != CLI_SOURCE_LABEL:
        return ExitCode.CONFIG_ERROR
    return ExitCode.INVALID_ARGUMENT


def fail(message: str, code: ExitCode) -> NoReturn:
    """Print ``message`` to stderr and exit with ``code``."""
    click.echo(f"Error: {message}", err=True)
    raise SystemExit(code)


def require_schema(load_schema: LoadSchema, path: Path) -> Command:
    """Load the schema at ``path`` or exit with FILE_NOT_FOUND / CONFIG_ERROR."""
    try:
        return load_schema(path)
    except FileNotFoundError:
        fail(f"Schema file not found: {path}", ExitCode.FILE_NOT_FOUND)
    except SchemaError as exc:
        fail(str(exc), ExitCode.CONFIG_ERROR)


def schema_config(root: Command, *, loose_file_options: bool = False) -> Config:
    """Return a Config over ``root`` with no command line, for validating files."""
    return Config(CommandLine(invoked_as=root.name, command=root), loose_file_options=loose_file_options)


def load_option_file(path: Path, config: Config, sections: Sequence[str] = ()) -> OptionFile:
    """Parse the option file at ``path`` against ``config`` and select ``sections``.

    Missing sections are logged and skipped, not treated as failures.

    Raises:
        FileNotFoundError: ``path`` does not exist.
        OptionError: The file is invalid for the schema.
    """
    option_file = OptionFile(path)
    option_file.parse(config)
    if sections:
        try:
            option_file.use_section(*sections)
        except MissingSectionError as exc:
            logger.warning("%s", exc)
    return option_file


__all__ = [
    "exit_code_for",
    "fail",
    "load_option_file",
    "require_schema",
    "schema_config",
]
