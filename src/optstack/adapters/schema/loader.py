"""Build command trees from TOML schema files.

Contents:
    * :func:`load_schema` - read, validate and build a schema file.
    * :func:`build_command_tree` - build a validated schema document.
    * :class:`SchemaError` - the schema cannot be used.

System Role:
    Turns declarative schemas into domain :class:`Command` trees for the
    ``optstack`` tool. Definition problems that the domain treats as
    programmer errors surface here as :class:`SchemaError`, since a schema is
    user input.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import rtoml
from pydantic import ValidationError

from optstack.domain.command import Command, new_command, new_command_suite
from optstack.domain.enums import OptionType
from optstack.domain.errors import CommandDefinitionError
from optstack.domain.option import Option, bool_option, string_option

from .models import CommandSchema, OptionSchema, SchemaDocument

logger = logging.getLogger(__name__)


class SchemaError(ValueError):
    """A schema file is unreadable, invalid, or describes a broken command tree.

    Example:
        >>> str(SchemaError("tool.toml", "missing [command] table"))
        'Invalid schema tool.toml: missing [command] table'
    """

    def __init__(self, path: str, problem: str) -> None:
        self.path = path
        self.problem = problem
        super().__init__(f"Invalid schema {path}: {problem}")


def _build_option(spec: OptionSchema) -> Option:
    if spec.type is OptionType.BOOL:
        option = bool_option(spec.name, spec.shorthand, spec.default == "1", spec.description)
    else:
        option = string_option(spec.name, spec.shorthand, spec.default, spec.description)
        if not spec.require_value:
            option.value_optional()
    if spec.hidden:
        option.hidden()
    if spec.deprecated:
        option.mark_deprecated(spec.deprecation_details)
    return option


def _build_command(spec: CommandSchema) -> Command:
    if spec.subcommands:
        command = new_command_suite(spec.name, spec.summary, spec.description)
    else:
        command = new_command(spec.name, spec.summary, spec.description, None)
    command.web_doc_url = spec.web_doc_url

    for option_spec in spec.options:
        option = _build_option(option_spec)
        if option_spec.group:
            command.add_options(option_spec.group, option)
        else:
            command.add_option(option)
    for arg in spec.args:
        command.add_arg(arg.name, arg.default, arg.required)
    for sub_spec in spec.subcommands:
        command.add_sub_command(_build_command(sub_spec))
    return command


def _check_shorthands(command: Command) -> None:
    # a sub-command shorthand replaces an inherited one, so only own options can clash
    options = command.options() if command.parent is None else command.own_options
    seen: dict[str, str] = {}
    for option in options.values():
        if not option.shorthand:
            continue
        other = seen.setdefault(option.shorthand, option.name)
        if other != option.name:
            raise CommandDefinitionError(
                f"Command {command.name} defines multiple conflicting options with short-form -{option.shorthand}"
            )
    for sub in command.sub_commands.values():
        _check_shorthands(sub)


def build_command_tree(data: Mapping[str, Any], source: str = "<schema>") -> Command:
    """Validate a parsed schema mapping and build its command tree.

    Raises:
        SchemaError: The mapping is not a valid schema.

    Example:
        >>> root = build_command_tree({"command": {"name": "tool", "summary": "2.1",
        ...     "options": [{"name": "port", "default": 3306}]}})
        >>> root.option_value("port")
        ('3306', True)
    """
    try:
        document = SchemaDocument.model_validate(data)
    except ValidationError as exc:
        raise SchemaError(source, str(exc)) from exc
    try:
        root = _build_command(document.command)
        _check_shorthands(root)
    except CommandDefinitionError as exc:
        raise SchemaError(source, str(exc)) from exc
    logger.debug("Built command tree %s from %s", root.name, source)
    return root


def load_schema(path: Path) -> Command:
    """Read a TOML schema file and build its command tree.

    The caller must keep the returned root alive for as long as any of its
    sub-commands are in use.

    Raises:
        FileNotFoundError: ``path`` does not exist.
        SchemaError: The file is not valid TOML or not a valid schema.
    """
    with path.open("r", encoding="utf-8") as fh:
        try:
            data = rtoml.load(fh)
        except rtoml.TomlParsingError as exc:
            raise SchemaError(str(path), str(exc)) from exc
    return build_command_tree(data, str(path))


__all__ = [
    "SchemaError",
    "build_command_tree",
    "load_schema",
]
