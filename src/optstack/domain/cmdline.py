"""Command-line tokenizer.

Contents:
    * :class:`CommandLine` - result of tokenizing one argument vector; also
      the highest-priority option source of a Config.
    * :func:`parse_cli` - tokenize ``argv`` against a command tree.

Supported syntax:
    ``--name``, ``--name=value``, ``--name value`` (value-required options
    only), ``-x``, ``-xvalue``, ``-x value``, clustered boolean shorthands
    (``-abc``), ``--`` to end option parsing, and a leading sub-command name
    when the active command is a suite.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Sequence

from .command import HELP_COMMAND, VERSION_COMMAND, Command
from .config import Config
from .errors import (
    CommandDefinitionError,
    EmptyCommandLineError,
    ExtraArgumentError,
    OptionMissingValueError,
    OptionNotDefinedError,
    TooFewArgumentsError,
    UnknownCommandError,
)
from .option import Option, normalize_option_token
from .quoting import EMPTY_SENTINEL

logger = logging.getLogger(__name__)

CLI_SOURCE_LABEL = "CLI"


class CommandLine:
    """Option and positional values supplied on one command line.

    Attributes:
        invoked_as: How the program was invoked (``argv[0]``).
        command: The (sub-)command being executed.
        option_values: Raw values of options supplied on the command line.
        arg_values: Positional arg values, excluding command names.
        root_command: The command tree the line was parsed against. Held so
            the tree stays alive for as long as the command line does.
    """

    def __init__(
        self,
        invoked_as: str,
        command: Command,
        option_values: dict[str, str] | None = None,
        arg_values: list[str] | None = None,
    ) -> None:
        self.invoked_as = invoked_as
        self.command = command
        self.root_command = command
        self.option_values: dict[str, str] = option_values if option_values is not None else {}
        self.arg_values: list[str] = arg_values if arg_values is not None else []

    def option_value(self, name: str) -> tuple[str, bool]:
        if name in self.option_values:
            return self.option_values[name], True
        return "", False

    def deprecation_warnings(self) -> list[str]:
        """Return a warning for each deprecated option used on the command line."""
        option_map = self.command.options()
        warnings: list[str] = []
        for name in self.option_values:
            option = option_map.get(name)
            if option is not None and option.deprecated:
                warnings.append(f"Option --{name} is deprecated. {option.deprecation_details}".rstrip())
        return warnings

    def __str__(self) -> str:
        # never reveal the actual values, which may be sensitive
        return "command line"

    def __repr__(self) -> str:
        return f"CommandLine(command={self.command.name!r}, args={len(self.arg_values)})"


def _looks_like_flag(token: str) -> bool:
    return token.startswith("-")


def _parse_long_arg(
    cli: CommandLine,
    token: str,
    remaining: deque[str],
    long_index: dict[str, Option],
) -> None:
    key, value, has_value, loose = normalize_option_token(token)
    if not key:
        return
    option = long_index.get(key)
    if option is None:
        if loose:
            logger.debug("Ignoring unknown loose option %s on command line", key)
            return
        raise OptionNotDefinedError(key, CLI_SOURCE_LABEL)

    # has_value (not value == "") decides, since --foo= and --skip-foo both count as valued
    if not has_value:
        if option.require_value:
            # allow "--foo bar" in addition to "--foo=bar"
            if not remaining or _looks_like_flag(remaining[0]):
                raise OptionMissingValueError(option.name, CLI_SOURCE_LABEL)
            value = remaining.popleft()
        elif option.is_bool:
            value = "1"
    elif value == "" and not option.is_bool:
        value = EMPTY_SENTINEL

    cli.option_values[option.name] = value


def _parse_short_args(
    cli: CommandLine,
    cluster: str,
    remaining: deque[str],
    short_index: dict[str, Option],
) -> None:
    for position, short in enumerate(cluster):
        option = short_index.get(short)
        if option is None:
            raise OptionNotDefinedError(short, CLI_SOURCE_LABEL)

        rest = cluster[position + 1 :]
        if rest and not option.is_bool:
            # "-xvalue": the remainder of the cluster is the value
            cli.option_values[option.name] = rest
            return
        if option.require_value:
            if not remaining or _looks_like_flag(remaining[0]):
                raise OptionMissingValueError(option.name, CLI_SOURCE_LABEL)
            cli.option_values[option.name] = remaining.popleft()
        else:
            # booleans treat a missing value as true; "-xyz" continues with y
            cli.option_values[option.name] = "1" if option.is_bool else ""


def _index_shorthands(command: Command, options: dict[str, Option]) -> dict[str, Option]:
    short_index: dict[str, Option] = {}
    for option in options.values():
        if not option.shorthand:
            continue
        if option.shorthand in short_index:
            raise CommandDefinitionError(
                f"Command {command.name} defines multiple conflicting options with short-form -{option.shorthand}"
            )
        short_index[option.shorthand] = option
    return short_index


def parse_cli(command: Command, argv: Sequence[str]) -> Config:
    """Tokenize ``argv`` against ``command`` and wrap the result in a Config.

    Args:
        command: Command tree to parse against, typically the root.
        argv: Full argument vector; ``argv[0]`` is the program invocation.

    Returns:
        Config whose highest-priority source is the parsed command line.

    Raises:
        EmptyCommandLineError: ``argv`` is empty.
        OptionNotDefinedError: An unknown, non-loose option was supplied.
        OptionMissingValueError: A value-required option lacked a value.
        UnknownCommandError: A sub-command name did not match.
        ExtraArgumentError: Too many positional args.
        TooFewArgumentsError: Too few positional args (unless help was requested).
        CommandDefinitionError: Two effective options share a shorthand.

    Example:
        >>> from optstack.domain.command import new_command
        >>> from optstack.domain.option import bool_option
        >>> cmd = new_command("tool", "1.0", "", None)
        >>> cmd.add_option(bool_option("verbose", "v"))
        >>> parse_cli(cmd, ["tool", "-v"]).get_bool("verbose")
        True
    """
    if not argv:
        raise EmptyCommandLineError()

    cli = CommandLine(invoked_as=argv[0], command=command)
    remaining = deque(argv[1:])

    long_index = command.options()
    short_index = _index_shorthands(command, long_index)
    no_more_options = False

    while remaining:
        token = remaining.popleft()
        active = cli.command

        if token == "--" and not no_more_options:
            no_more_options = True
        elif not no_more_options and len(token) > 2 and token.startswith("--"):
            _parse_long_arg(cli, token[2:], remaining, long_index)
        elif not no_more_options and len(token) > 1 and token.startswith("-"):
            _parse_short_args(cli, token[1:], remaining, short_index)
        elif active.sub_commands:
            sub = active.sub_commands.get(token)
            if sub is None:
                raise UnknownCommandError(token)
            cli.command = sub
            # the sub-command's options win over same-named ancestor options
            for name, option in sub.own_options.items():
                long_index[name] = option
                if option.shorthand:
                    short_index[option.shorthand] = option
        elif not cli.arg_values and token in (HELP_COMMAND, VERSION_COMMAND):
            _parse_long_arg(cli, token, remaining, long_index)
        elif len(cli.arg_values) >= active.max_args():
            raise ExtraArgumentError(token, active.name, active.max_args())
        else:
            cli.arg_values.append(token)

    if HELP_COMMAND not in cli.option_values and len(cli.arg_values) < cli.command.min_args():
        raise TooFewArgumentsError(cli.command.name, cli.command.min_args())

    # a suite invoked without a sub-command shows its help
    if cli.command.sub_commands:
        cli.command = cli.command.sub_commands[HELP_COMMAND]

    logger.debug(
        "Parsed command line for %s: %d options, %d args",
        cli.command.name,
        len(cli.option_values),
        len(cli.arg_values),
    )
    return Config(cli)


__all__ = [
    "CLI_SOURCE_LABEL",
    "CommandLine",
    "parse_cli",
]
