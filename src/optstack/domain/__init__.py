"""Domain layer - the option resolution engine, with no I/O or framework dependencies.

Contents:
    * :mod:`.option` - Option definitions and the token normalizer
    * :mod:`.command` - Command tree with inherited options and positional args
    * :mod:`.cmdline` - Command-line tokenizer
    * :mod:`.lines` - Option-file line grammar
    * :mod:`.config` - Layered resolver with provenance and typed getters
    * :mod:`.quoting` - Quote stripping for raw values
    * :mod:`.sources` - Option source protocols
    * :mod:`.enums` - Domain enumerations (OptionType, OutputFormat)
    * :mod:`.errors` - Domain exception types
"""

from __future__ import annotations

from .cmdline import CommandLine, parse_cli
from .command import Command, CommandHandler, OptionGroup, new_command, new_command_suite
from .config import Config
from .enums import OptionType, OutputFormat
from .errors import (
    ArgumentCountError,
    CommandDefinitionError,
    EmptyCommandLineError,
    ExtraArgumentError,
    FileParseFormatError,
    FileStateError,
    InvariantViolation,
    MissingSectionError,
    OptionError,
    OptionMissingValueError,
    OptionNotDefinedError,
    OptionValueError,
    TooFewArgumentsError,
    UnknownCommandError,
    UnknownOptionError,
)
from .lines import LineKind, LineSyntaxError, ParsedLine, parse_line
from .option import (
    Option,
    OptionToken,
    bool_option,
    bool_value,
    normalize_option_name,
    normalize_option_token,
    string_option,
)
from .quoting import EMPTY_SENTINEL, trim_quotes, unquote
from .sources import DeprecationWarner, OptionSource, StringMapSource

__all__ = [
    # Options
    "Option",
    "OptionToken",
    "bool_option",
    "bool_value",
    "normalize_option_name",
    "normalize_option_token",
    "string_option",
    # Commands
    "Command",
    "CommandHandler",
    "OptionGroup",
    "new_command",
    "new_command_suite",
    # Parsing
    "CommandLine",
    "LineKind",
    "LineSyntaxError",
    "ParsedLine",
    "parse_cli",
    "parse_line",
    # Resolution
    "Config",
    "DeprecationWarner",
    "OptionSource",
    "StringMapSource",
    "EMPTY_SENTINEL",
    "trim_quotes",
    "unquote",
    # Enums
    "OptionType",
    "OutputFormat",
    # Errors
    "ArgumentCountError",
    "CommandDefinitionError",
    "EmptyCommandLineError",
    "ExtraArgumentError",
    "FileParseFormatError",
    "FileStateError",
    "InvariantViolation",
    "MissingSectionError",
    "OptionError",
    "OptionMissingValueError",
    "OptionNotDefinedError",
    "OptionValueError",
    "TooFewArgumentsError",
    "UnknownCommandError",
    "UnknownOptionError",
]
