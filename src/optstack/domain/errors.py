"""Domain-specific exceptions for typed error handling at boundaries.

Two families are defined here:

* :class:`OptionError` - recoverable problems caused by user input (unknown
  options, missing values, malformed option files, bad positional args).
  These are caught at the CLI boundary and reported as usage errors.
* :class:`InvariantViolation` - programmer errors (conflicting command
  definitions, lookups of undeclared options, use of unparsed files). These
  are never caught by the library and are meant to abort the process.
"""

from __future__ import annotations


class OptionError(Exception):
    """Base class for recoverable option-resolution errors."""


class OptionNotDefinedError(OptionError):
    """An option name was used that no command declares.

    Example:
        >>> str(OptionNotDefinedError("frobnicate", "CLI"))
        'CLI: Unknown option "frobnicate"'
        >>> str(OptionNotDefinedError("frobnicate"))
        'Unknown option "frobnicate"'
    """

    def __init__(self, name: str, source: str = "") -> None:
        self.name = name
        self.source = source
        prefix = f"{source}: " if source else ""
        super().__init__(f'{prefix}Unknown option "{name}"')


class OptionMissingValueError(OptionError):
    """An option requiring a value was supplied without one.

    Example:
        >>> str(OptionMissingValueError("host", "CLI"))
        'CLI: Missing required value for option host'
    """

    def __init__(self, name: str, source: str = "") -> None:
        self.name = name
        self.source = source
        prefix = f"{source}: " if source else ""
        super().__init__(f"{prefix}Missing required value for option {name}")


class FileParseFormatError(OptionError):
    """An option file line could not be parsed.

    Example:
        >>> err = FileParseFormatError("unterminated section name", "/etc/tool.cnf", 3)
        >>> str(err)
        'Parse error in /etc/tool.cnf line 3: unterminated section name'
        >>> err.line_number
        3
    """

    def __init__(self, problem: str, path: str, line_number: int) -> None:
        self.problem = problem
        self.path = path
        self.line_number = line_number
        super().__init__(f"Parse error in {path} line {line_number}: {problem}")


class UnknownCommandError(OptionError):
    """A sub-command name did not match any child of a command suite."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'Unknown command "{name}"')


class ArgumentCountError(OptionError):
    """Wrong number of positional args on the command line."""


class ExtraArgumentError(ArgumentCountError):
    """More positional args were supplied than the command declares."""

    def __init__(self, arg: str, command_name: str, max_args: int) -> None:
        self.arg = arg
        super().__init__(
            f'Extra command-line arg "{arg}" supplied; command {command_name} takes a max of {max_args} args'
        )


class TooFewArgumentsError(ArgumentCountError):
    """Fewer positional args were supplied than the command requires."""

    def __init__(self, command_name: str, min_args: int) -> None:
        super().__init__(
            f"Too few positional args supplied on command line; command {command_name} requires at least {min_args} args"
        )


class EmptyCommandLineError(OptionError):
    """The argument vector did not even contain the program invocation."""

    def __init__(self) -> None:
        super().__init__("No command-line supplied")


class OptionValueError(OptionError, ValueError):
    """An option value could not be interpreted as the requested type.

    Inherits from ValueError so plain ``except ValueError`` handlers keep
    working for int and byte-size conversions.
    """


class MissingSectionError(OptionError):
    """One or more requested option file sections do not exist."""

    def __init__(self, path: str, names: list[str]) -> None:
        self.path = path
        self.names = names
        super().__init__(f"File {path} missing section: {', '.join(names)}")


class InvariantViolation(RuntimeError):
    """Base class for programmer errors that should abort, not be handled."""


class CommandDefinitionError(InvariantViolation):
    """A command or option was declared in a contradictory way."""


class FileStateError(InvariantViolation):
    """An option file was used in the wrong lifecycle state."""


class UnknownOptionError(InvariantViolation):
    """A getter or provenance lookup named an option that does not exist."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Assertion failed: option {name} does not exist")


__all__ = [
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
