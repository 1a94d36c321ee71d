"""Command dispatch - run the handler selected by a parsed command line.

Contents:
    * :func:`handle_command` - route ``--help``/``--version`` or call the leaf handler.
    * :func:`render_usage` - plain-text help for one command.
    * :func:`requests_builtin` - whether help or version output was requested.
    * :func:`help_handler` / :func:`version_handler` - built-in handlers.

System Role:
    Application use case on top of the domain resolver. Output goes through
    an injected ``echo`` callable so no presentation framework leaks in.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..domain.command import HELP_COMMAND, VERSION_COMMAND, Command
from ..domain.config import Config
from ..domain.errors import CommandDefinitionError, UnknownCommandError
from ..domain.quoting import unquote

logger = logging.getLogger(__name__)

Echo = Callable[[str], None]


def _option_line(shorthand: str, usage_name: str, width: int, description: str) -> str:
    short = f"-{shorthand}," if shorthand else ""
    return f"  {short:>3} --{usage_name:<{width}}  {description}"


def render_usage(command: Command) -> str:
    """Return help text for ``command``: invocation, description, sub-commands, options.

    Example:
        >>> from optstack.domain.command import new_command
        >>> print(render_usage(new_command("tool", "1.0", "Does things.", None)).strip())
        Usage:  tool [<options>]
        <BLANKLINE>
        Does things.
        <BLANKLINE>
        Global Options:
          -?, --help[=value]  Display usage information for the specified command
              --version       Display program version
    """
    lines = ["", f"Usage:  {command.invocation()}", "", command.description]

    if command.sub_commands:
        lines.extend(["", "Commands:"])
        width = max(len(name) for name in command.sub_commands)
        for name in sorted(command.sub_commands):
            lines.append(f"      {name:<{width}}  {command.sub_commands[name].summary}")

    options = command.options()
    width = max((len(option.usage_name()) for option in options.values()), default=0)
    for group in command.option_groups():
        group_name = group.name
        if not group_name and command.parent is not None:
            group_name = command.name
        lines.extend(["", f"{group_name.title()} Options:".strip()])
        for option in group.options:
            description = f"{option.description}{option.default_usage()}"
            lines.append(_option_line(option.shorthand, option.usage_name(), width, description))

    web_docs = command.web_doc_text()
    if web_docs:
        lines.extend(["", web_docs, ""])
    return "\n".join(lines) + "\n"


def help_handler(config: Config, echo: Echo) -> int:
    """Print usage for the active command, or for the sub-command named as first arg.

    Raises:
        UnknownCommandError: The named sub-command does not exist.
    """
    command = config.cli.command
    parent = command.parent
    if command.name == HELP_COMMAND and parent is not None:
        command = parent
    wanted = unquote(config.cli.arg_values[0]) if config.cli.arg_values else ""
    if command.sub_commands and wanted:
        sub = command.sub_commands.get(wanted)
        if sub is None:
            raise UnknownCommandError(wanted)
        command = sub
    echo(render_usage(command))
    return 0


def version_handler(config: Config, echo: Echo) -> int:
    """Print ``<program> version <version>`` using the root command's summary."""
    root = config.cli.command.root()
    echo(f"{root.name} version {root.summary or 'not specified'}")
    return 0


def requests_builtin(config: Config) -> bool:
    """Return True if the command line asks for help or version output.

    Example:
        >>> from optstack.domain.cmdline import parse_cli
        >>> from optstack.domain.command import new_command_suite
        >>> suite = new_command_suite("tool", "1.0", "")
        >>> requests_builtin(parse_cli(suite, ["tool", "version"]))
        True
    """
    cli = config.cli
    if HELP_COMMAND in cli.option_values or cli.option_values.get(VERSION_COMMAND) == "1":
        return True
    command = cli.command
    return command.handler is None and command.parent is not None and command.name in (HELP_COMMAND, VERSION_COMMAND)


def handle_command(config: Config, echo: Echo) -> int:
    """Execute the command selected on the parsed command line.

    ``--help[=command]`` and ``--version`` take priority over the selected
    command's handler, which is otherwise called with ``config``.

    Returns:
        The handler's exit code.

    Raises:
        CommandDefinitionError: The selected command has no handler.
    """
    cli = config.cli
    if HELP_COMMAND in cli.option_values:
        # "tool --help sub" shows help for sub
        cli.arg_values = [cli.option_values[HELP_COMMAND]]
        return help_handler(config, echo)
    if cli.option_values.get(VERSION_COMMAND) == "1":
        return version_handler(config, echo)

    command = cli.command
    if command.handler is not None:
        logger.debug("Dispatching to handler of command %s", command.name)
        return command.handler(config)
    if command.parent is not None and command.name == HELP_COMMAND:
        return help_handler(config, echo)
    if command.parent is not None and command.name == VERSION_COMMAND:
        return version_handler(config, echo)
    raise CommandDefinitionError(f"Command {command.name} has no handler")


__all__ = [
    "Echo",
    "handle_command",
    "help_handler",
    "render_usage",
    "requests_builtin",
    "version_handler",
]
