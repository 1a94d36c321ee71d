"""Type-safe domain enums for option kinds and output formats."""

from __future__ import annotations

from enum import Enum


class OptionType(str, Enum):
    """Kinds of option values.

    From the command line or an option file every value is a string; typed
    interpretation (int, byte size, enum) happens in the Config getters. Only
    booleans get distinct parsing rules, so only two kinds exist.

    Example:
        >>> OptionType.BOOL.value
        'bool'
        >>> OptionType("string") is OptionType.STRING
        True
    """

    STRING = "string"
    BOOL = "bool"


class OutputFormat(str, Enum):
    """Output format options for configuration and resolution display.

    Inherits from str to allow direct string comparison and Click integration.

    Attributes:
        HUMAN: Human-readable table/TOML-like output.
        JSON: Machine-readable JSON output.

    Example:
        >>> OutputFormat.HUMAN.value
        'human'
        >>> OutputFormat.JSON == "json"
        True
    """

    HUMAN = "human"
    JSON = "json"


__all__ = [
    "OptionType",
    "OutputFormat",
]
