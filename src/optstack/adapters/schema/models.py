"""Pydantic models describing a command-tree schema document.

A schema is a TOML document with one ``[command]`` table::

    [command]
    name = "tool"
    summary = "1.0"

    [[command.options]]
    name = "host"
    shorthand = "h"
    default = "localhost"

    [[command.subcommands]]
    name = "push"
    summary = "Push changes"

    [[command.subcommands.args]]
    name = "environment"
    required = true
"""

from __future__ import annotations

from typing import Any, cast

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from optstack.domain.enums import OptionType
from optstack.domain.option import bool_value


class OptionSchema(BaseModel):
    """One ``[[command.options]]`` entry.

    Example:
        >>> OptionSchema(name="verbose", type="bool", default=True).default
        '1'
        >>> OptionSchema(name="host").require_value
        True
        >>> OptionSchema(name="debug", type="bool").require_value
        False
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    type: OptionType = OptionType.STRING
    default: str = ""
    shorthand: str = Field(default="", max_length=1)
    description: str = ""
    require_value: bool = True
    hidden: bool = False
    group: str = ""
    deprecated: bool = False
    deprecation_details: str = ""

    @field_validator("default", mode="before")
    @classmethod
    def _coerce_default(cls, v: Any) -> Any:
        """Accept TOML booleans and integers as defaults.

        Examples:
            >>> OptionSchema._coerce_default(False)
            '0'
            >>> OptionSchema._coerce_default(3306)
            '3306'
        """
        if isinstance(v, bool):
            return "1" if v else "0"
        if isinstance(v, int):
            return str(v)
        return v

    @model_validator(mode="before")
    @classmethod
    def _apply_kind_rules(cls, data: Any) -> Any:
        """Derive ``require_value`` from the kind and canonicalize boolean defaults."""
        if not isinstance(data, dict):
            return data
        values = cast("dict[str, Any]", data).copy()
        is_bool = values.get("type", OptionType.STRING) == OptionType.BOOL
        if values.get("require_value") is None:
            values["require_value"] = not is_bool
        elif is_bool and values["require_value"]:
            raise ValueError(f"option {values.get('name')}: boolean options cannot have required value")
        if is_bool:
            default = values.get("default", False)
            if isinstance(default, str):
                default = bool_value(default.strip())
            values["default"] = "1" if default else "0"
        return values


class ArgSchema(BaseModel):
    """One ``[[command.args]]`` positional arg entry."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    default: str = ""
    required: bool = False


def _no_options() -> list[OptionSchema]:
    return []


def _no_args() -> list[ArgSchema]:
    return []


def _no_subcommands() -> list[CommandSchema]:
    return []


class CommandSchema(BaseModel):
    """A command table; nested ``subcommands`` make it a command suite."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str = Field(min_length=1)
    summary: str = ""
    description: str = ""
    web_doc_url: str = ""
    options: list[OptionSchema] = Field(default_factory=_no_options)
    args: list[ArgSchema] = Field(default_factory=_no_args)
    subcommands: list[CommandSchema] = Field(default_factory=_no_subcommands)

    @model_validator(mode="after")
    def _suites_take_no_args(self) -> CommandSchema:
        if self.subcommands and self.args:
            raise ValueError(f"command {self.name}: a command with subcommands cannot declare args")
        return self


class SchemaDocument(BaseModel):
    """Top level of a schema file."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    command: CommandSchema


__all__ = [
    "ArgSchema",
    "CommandSchema",
    "OptionSchema",
    "SchemaDocument",
]
