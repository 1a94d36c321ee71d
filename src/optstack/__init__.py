"""Public package surface of optstack.

Routes imports through the architectural layers:
- Domain exports: commands, options, parsing and the layered Config
- Adapter exports: option files as sources
- Composition exports: the tool's own configuration loader
- Metadata: package information
"""

from __future__ import annotations

# Metadata
from .__init__conf__ import print_info

# Adapter exports
from .adapters.optionfile import OptionFile

# Composition exports (wired adapters)
from .composition import get_config

# Domain exports
from .domain import (
    Command,
    CommandLine,
    Config,
    InvariantViolation,
    Option,
    OptionError,
    OptionType,
    StringMapSource,
    bool_option,
    new_command,
    new_command_suite,
    normalize_option_token,
    parse_cli,
    string_option,
)

__all__ = [
    "Command",
    "CommandLine",
    "Config",
    "InvariantViolation",
    "Option",
    "OptionError",
    "OptionFile",
    "OptionType",
    "StringMapSource",
    "bool_option",
    "get_config",
    "new_command",
    "new_command_suite",
    "normalize_option_token",
    "parse_cli",
    "print_info",
    "string_option",
]
