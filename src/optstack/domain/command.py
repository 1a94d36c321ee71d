"""Command tree: commands, command suites and their declared options.

Contents:
    * :class:`Command` - a program, sub-command, or nested command suite.
    * :func:`new_command` - standalone command with a handler.
    * :func:`new_command_suite` - command with sub-commands, plus built-in
      ``help`` and ``version`` sub-commands.
    * :class:`OptionGroup` - options grouped for help display.

System Role:
    Parents own their children; each child keeps only a weak reference to its
    parent for upward lookups, so the tree never forms a reference cycle.
    A Command also acts as the lowest-priority option source, answering every
    lookup with the declared default.
"""

from __future__ import annotations

import weakref
from collections.abc import Callable, Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING, NamedTuple

from .errors import CommandDefinitionError
from .option import Option, bool_option, string_option

if TYPE_CHECKING:
    from .config import Config

CommandHandler = Callable[["Config"], int]
"""Callback implementing a command's logic; returns a process exit code."""

HELP_COMMAND = "help"
VERSION_COMMAND = "version"
GLOBAL_GROUP = "global"


class OptionGroup(NamedTuple):
    """Named group of options, sorted by option name."""

    name: str
    options: tuple[Option, ...]


class Command:
    """A node in the command tree.

    A command either has a handler (a leaf) or sub-commands (a suite); never
    both. Options declared here are inherited by all descendants, which may
    override them by redeclaring the same name.

    Attributes:
        name: Name used on the command line.
        summary: Short description. For a root command this is the version.
        description: Long help text.
        web_doc_url: Optional online documentation URL.
        handler: Callback for leaf commands; ``None`` for suites.
        sub_commands: Children indexed by name (empty for leaf commands).
    """

    def __init__(
        self,
        name: str,
        summary: str = "",
        description: str = "",
        handler: CommandHandler | None = None,
        *,
        suite: bool = False,
        web_doc_url: str = "",
    ) -> None:
        self.name = name
        self.summary = summary
        self.description = description
        self.web_doc_url = web_doc_url
        self.handler = handler
        self.is_suite = suite
        self.sub_commands: dict[str, Command] = {}
        self._options: dict[str, Option] = {}
        self._args: list[Option] = []
        self._parent: weakref.ref[Command] | None = None

    def __repr__(self) -> str:
        return f"Command({self.name!r})"

    def __str__(self) -> str:
        return f"command {self.name}"

    @property
    def parent(self) -> Command | None:
        """Command this is a sub-command of, or None at the top level."""
        if self._parent is None:
            return None
        return self._parent()

    @property
    def own_options(self) -> Mapping[str, Option]:
        """Read-only view of options declared directly on this command."""
        return MappingProxyType(self._options)

    @property
    def args(self) -> tuple[Option, ...]:
        """Positional arg declarations in order."""
        return tuple(self._args)

    def add_sub_command(self, sub: Command) -> None:
        """Attach ``sub`` as a child of this command suite.

        Raises:
            CommandDefinitionError: If this command is not a suite.
        """
        if not self.is_suite or self.handler is not None:
            raise CommandDefinitionError(f"AddSubCommand: Parent command {self.name} was not created as a CommandSuite")
        sub._parent = weakref.ref(self)
        self.sub_commands[sub.name] = sub
        # only the top-level suite offers version as a command
        sub.sub_commands.pop(VERSION_COMMAND, None)

    def add_arg(self, name: str, default: str = "", required: bool = False) -> None:
        """Declare a positional arg. Optional args fall back to ``default``.

        Raises:
            CommandDefinitionError: On a duplicate name, a required arg after an
                optional one, or a default on a required arg.
        """
        for arg in self._args:
            if arg.name == name:
                raise CommandDefinitionError(
                    f"Cannot add arg {name} to command {self.name}: prior arg already has that name"
                )
            if required and not arg.require_value:
                raise CommandDefinitionError(
                    f"Cannot add required arg {name} to command {self.name}: prior arg {arg.name} is optional"
                )
        if required and default:
            raise CommandDefinitionError(
                f"Cannot add required arg {name} to command {self.name}: required args cannot have a default value"
            )
        self._args.append(Option(name=name, default=default, require_value=required))

    def add_option(self, option: Option) -> None:
        self._options[option.name] = option

    def add_options(self, group: str, *options: Option) -> None:
        """Add options, setting each one's help group to ``group``."""
        for option in options:
            option.group = group
            self.add_option(option)

    def options(self) -> dict[str, Option]:
        """Return the effective options, merged with all ancestors.

        Sub-command options override same-named ancestor options. The result
        is a fresh dict; mutating it does not affect the command. Positional
        args are not included.
        """
        parent = self.parent
        merged = parent.options() if parent is not None else {}
        merged.update(self._options)
        return merged

    def option_value(self, name: str) -> tuple[str, bool]:
        """Return the default for an option or positional arg.

        This lets a Command act as the lowest-priority option source.
        """
        option = self.options().get(name)
        if option is not None:
            return option.default, True
        for arg in self._args:
            if arg.name == name:
                return arg.default, True
        return "", False

    def root(self) -> Command:
        """Return the top-level ancestor of this command."""
        current = self
        while (parent := current.parent) is not None:
            current = parent
        return current

    def has_arg(self, name: str) -> bool:
        return any(arg.name == name for arg in self._args)

    def min_args(self) -> int:
        """Return the number of leading required positional args."""
        for position, arg in enumerate(self._args):
            if not arg.require_value:
                return position
        return len(self._args)

    def max_args(self) -> int:
        return len(self._args)

    def invocation(self) -> str:
        """Return the usage line, e.g. ``tool sub [<options>] <name> [<host>]``."""
        names = [self.name]
        current = self.parent
        while current is not None:
            names.insert(0, current.name)
            current = current.parent
        return f"{' '.join(names)} [<options>]{self.arg_usage()}"

    def arg_usage(self) -> str:
        if self.sub_commands:
            return " <command>"
        usage = ""
        optional = 0
        for arg in self._args:
            if arg.require_value:
                usage += f" <{arg.name}>"
            else:
                usage += f" [<{arg.name}>"
                optional += 1
        return usage + "]" * optional

    def option_groups(self) -> list[OptionGroup]:
        """Return visible options grouped for help display.

        The unnamed group comes first, then named groups alphabetically, then
        the ``global`` group. Options are sorted by name within each group.
        """
        nameless: list[Option] = []
        global_opts: list[Option] = []
        others: dict[str, list[Option]] = {}
        for option in self.options().values():
            if option.hidden_on_cli:
                continue
            if option.group == "":
                nameless.append(option)
            elif option.group == GLOBAL_GROUP:
                global_opts.append(option)
            else:
                others.setdefault(option.group, []).append(option)

        def _group(name: str, opts: list[Option]) -> OptionGroup:
            return OptionGroup(name, tuple(sorted(opts, key=lambda opt: opt.name)))

        groups: list[OptionGroup] = []
        if nameless:
            groups.append(_group("", nameless))
        groups.extend(_group(name, others[name]) for name in sorted(others))
        if global_opts:
            groups.append(_group(GLOBAL_GROUP, global_opts))
        return groups

    def web_doc_text(self) -> str:
        """Return a sentence pointing at online docs, or ``""`` if none exist.

        A command without its own URL inherits the nearest ancestor's URL with
        its own path appended.
        """
        noun = "command suite" if self.sub_commands else "command"
        sub_path = ""
        current = self
        while not current.web_doc_url and (parent := current.parent) is not None:
            sub_path = f"/{current.name}{sub_path}"
            current = parent
        if not current.web_doc_url:
            return ""
        return f"Complete documentation for this {noun} is available online: {current.web_doc_url}{sub_path}"


def _help_option() -> Option:
    return string_option(
        HELP_COMMAND, "?", "", "Display usage information for the specified command"
    ).value_optional()


def _version_option() -> Option:
    return bool_option(VERSION_COMMAND, "", False, "Display program version")


def new_command(name: str, summary: str, description: str, handler: CommandHandler | None) -> Command:
    """Create a standalone command (one without sub-commands).

    For a top-level command, pass the version string as ``summary``.

    Example:
        >>> cmd = new_command("tool", "1.0", "A tool", None)
        >>> sorted(cmd.options())
        ['help', 'version']
    """
    cmd = Command(name, summary, description, handler)
    cmd.add_options(GLOBAL_GROUP, _help_option(), _version_option())
    return cmd


def new_command_suite(name: str, summary: str, description: str) -> Command:
    """Create a command suite with built-in ``help`` and ``version`` sub-commands.

    For a top-level suite, pass the version string as ``summary``.

    Example:
        >>> suite = new_command_suite("tool", "1.0", "A tool")
        >>> sorted(suite.sub_commands)
        ['help', 'version']
    """
    cmd = Command(name, summary, description, suite=True)

    help_cmd = Command(HELP_COMMAND, "Display usage information", "Display usage information")
    help_cmd.add_arg("command", "", required=False)
    version_cmd = Command(VERSION_COMMAND, "Display program version", "Display program version")

    cmd.add_sub_command(version_cmd)
    cmd.add_sub_command(help_cmd)
    cmd.add_options(GLOBAL_GROUP, _version_option(), _help_option())
    return cmd


__all__ = [
    "GLOBAL_GROUP",
    "HELP_COMMAND",
    "VERSION_COMMAND",
    "Command",
    "CommandHandler",
    "OptionGroup",
    "new_command",
    "new_command_suite",
]
