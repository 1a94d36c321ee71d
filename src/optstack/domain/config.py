"""Layered option resolution with provenance.

Contents:
    * :class:`Config` - resolves every option of the active command from a
      ranked list of sources and offers typed getters.

Precedence, lowest to highest:
    command defaults -> added sources (in the order added) -> command line

Positional args supplied on the command line take precedence over a
same-named option; positional args that were *not* supplied leave a
same-named option to the normal source scan.
"""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING

from .command import Command
from .enums import OptionType
from .errors import InvariantViolation, OptionValueError, UnknownOptionError
from .option import Option, bool_value
from .quoting import unquote
from .sources import DeprecationWarner, OptionSource

if TYPE_CHECKING:
    from .cmdline import CommandLine

logger = logging.getLogger(__name__)

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_BYTES_PATTERN = re.compile(r"([0-9]+)([kmg]?)b?")
_BYTE_MULTIPLIERS = {"": 1, "k": 1024, "m": 1024**2, "g": 1024**3}


class Config:
    """Unified, cached view of option values across all sources.

    The cache is rebuilt lazily after any source is added or after
    :meth:`mark_dirty`. Instances are not thread-safe while sources change;
    once the cache is built, concurrent read-only use is fine.

    Attributes:
        cli: The parsed command line; always the highest-priority source.
        loose_file_options: When True, option files parsed against this
            Config silently skip unknown options.
        is_test: Marks configs built by test helpers.
    """

    def __init__(
        self,
        cli: CommandLine,
        *sources: OptionSource,
        loose_file_options: bool = False,
        is_test: bool = False,
    ) -> None:
        self.cli = cli
        self.loose_file_options = loose_file_options
        self.is_test = is_test
        self._sources: list[OptionSource] = list(sources)
        self._unified_values: dict[str, str] = {}
        self._unified_sources: dict[str, OptionSource] = {}
        self._dirty = True

    def __repr__(self) -> str:
        return f"Config(command={self.cli.command.name!r}, sources={len(self._sources)})"

    @property
    def sources(self) -> tuple[OptionSource, ...]:
        """Added sources, lowest priority first (excludes command and CLI)."""
        return tuple(self._sources)

    def clone(self) -> Config:
        """Return a copy sharing the command line and source objects.

        The copy owns its own source list, so adding sources to it leaves the
        original untouched.
        """
        return Config(
            self.cli,
            *self._sources,
            loose_file_options=self.loose_file_options,
            is_test=self.is_test,
        )

    def add_source(self, source: OptionSource) -> None:
        """Add a source overriding all previously added ones (but not the CLI)."""
        self._sources.append(source)
        self._dirty = True

    def mark_dirty(self) -> None:
        """Force a rebuild on next lookup, after a source changed in place."""
        self._dirty = True

    def _rebuild(self) -> None:
        command = self.cli.command
        ranked: list[OptionSource] = [command, *self._sources, self.cli]
        options = command.options()
        values: dict[str, str] = {}
        sources: dict[str, OptionSource] = {}

        for position, arg in enumerate(command.args):
            if position < len(self.cli.arg_values):
                values[arg.name] = self.cli.arg_values[position]
                sources[arg.name] = self.cli
                # a supplied positional shadows any option with the same name
                options.pop(arg.name, None)
            else:
                # an unsupplied positional must not shadow a supplied option
                values[arg.name] = arg.default
                sources[arg.name] = command

        for name in options:
            for source in reversed(ranked):
                value, found = source.option_value(name)
                if found:
                    values[name] = value
                    sources[name] = source
                    break
            else:
                raise InvariantViolation(
                    f"Assertion failed: Iterated over option {name} not provided by command {command.name}"
                )

        self._unified_values = values
        self._unified_sources = sources
        self._dirty = False
        logger.debug("Rebuilt option cache for %s from %d sources", command.name, len(ranked))

    def _rebuild_if_dirty(self) -> None:
        if self._dirty:
            self._rebuild()

    def source(self, name: str) -> OptionSource:
        """Return the source that supplied the resolved value of ``name``.

        Raises:
            UnknownOptionError: ``name`` is not an option or arg of the command.
        """
        self._rebuild_if_dirty()
        try:
            return self._unified_sources[name]
        except KeyError:
            raise UnknownOptionError(name) from None

    def supplied(self, name: str) -> bool:
        """Return True if any source other than the command defaults set ``name``.

        This is True even when the supplied value equals the default; see
        :meth:`changed` for the more common check.
        """
        return not isinstance(self.source(name), Command)

    def changed(self, name: str) -> bool:
        """Return True if ``name`` was supplied with a value differing from its default."""
        if not self.supplied(name):
            return False
        option = self.find_option(name)
        if option is None:
            raise UnknownOptionError(name)
        return unquote(self._unified_values[name]) != option.default

    def supplied_with_value(self, name: str) -> bool:
        """Return True if ``name`` was supplied with an explicit value, even an empty one.

        ``--foo=`` and ``foo=''`` count; a bare ``--foo`` or ``foo`` does not.
        Only meaningful for value-optional string options.

        Raises:
            InvariantViolation: ``name`` is not a value-optional string option.
        """
        option = self.find_option(name)
        if option is None or option.kind is not OptionType.STRING or option.require_value:
            raise InvariantViolation(f"Assertion failed: SuppliedWithValue called on wrong kind of option {name}")
        if not self.supplied(name):
            return False
        return self.get_raw(name) != ""

    def on_cli(self, name: str) -> bool:
        """Return True if the resolved value of ``name`` came from the command line."""
        return self.source(name) is self.cli

    def find_option(self, name: str) -> Option | None:
        """Find an option or positional arg by name anywhere in the command tree.

        The active command's hierarchy is searched first, then every other
        command reachable from the root. This lets option files mention options
        that only matter to other sub-commands.
        """
        command = self.cli.command
        option = command.options().get(name)
        if option is not None:
            return option
        for arg in command.args:
            if arg.name == name:
                return arg
        return _find_in_tree(command.root(), name)

    def get_raw(self, name: str) -> str:
        """Return the resolved value exactly as stored, quotes included.

        Raises:
            UnknownOptionError: ``name`` is not an option or arg of the command.
        """
        self._rebuild_if_dirty()
        try:
            return self._unified_values[name]
        except KeyError:
            raise UnknownOptionError(name) from None

    def get(self, name: str) -> str:
        """Return the resolved value with surrounding quotes removed."""
        return unquote(self.get_raw(name))

    def get_bool(self, name: str) -> bool:
        return bool_value(self.get(name))

    def get_int(self, name: str) -> int:
        """Return the value parsed as a base-10 integer.

        Raises:
            OptionValueError: The value is not an integer.
        """
        value = self.get(name)
        if not _INT_PATTERN.fullmatch(value):
            raise OptionValueError(f"Option {name} value {value!r} is not an integer")
        return int(value)

    def get_int_or_default(self, name: str) -> int:
        """Like :meth:`get_int`, but fall back to the declared default on failure.

        Raises:
            InvariantViolation: The declared default is not an integer either.
        """
        try:
            return self.get_int(name)
        except OptionValueError:
            default, _ = self.cli.command.option_value(name)
            if not _INT_PATTERN.fullmatch(default.strip()):
                raise InvariantViolation(
                    f"Assertion failed: default value for option {name} is {default}, which fails int parsing"
                ) from None
            return int(default)

    def get_enum(self, name: str, *allowed: str) -> str:
        """Return the value if it case-insensitively matches an allowed value.

        The option's own default is always accepted. The returned string keeps
        the casing given in ``allowed`` (or of the default).

        Raises:
            OptionValueError: The value is not allowed; lists all choices.
        """
        value = self.get(name).lower()
        default, _ = self.cli.command.option_value(name)
        seen_default = False
        for candidate in allowed:
            if value == candidate.lower():
                return candidate
            if candidate.lower() == default.lower():
                seen_default = True
        choices = list(allowed)
        if not seen_default:
            if value == default.lower():
                return default
            choices.append(default)
        quoted = ", ".join(f'"{choice}"' for choice in choices)
        raise OptionValueError(f"Option {name} can only be set to one of these values: {quoted}")

    def get_bytes(self, name: str) -> int:
        """Return the value as a byte count, honoring K/M/G suffixes.

        Suffixes are case-insensitive and may carry a trailing ``B``; they
        multiply by 1024, 1024**2 and 1024**3. An empty value is zero.

        Raises:
            OptionValueError: The value is not a non-negative byte size.
        """
        value = self.get(name).lower()
        if value == "":
            return 0
        match = _BYTES_PATTERN.fullmatch(value)
        if match is None:
            raise OptionValueError(f"Option {name} value {value!r} is not a valid byte size")
        digits, suffix = match.groups()
        return int(digits) * _BYTE_MULTIPLIERS[suffix]

    def deprecation_warnings(self) -> list[str]:
        """Collect deprecation warnings from the command line and all sources."""
        warnings = self.cli.deprecation_warnings()
        for source in self._sources:
            if isinstance(source, DeprecationWarner):
                warnings.extend(source.deprecation_warnings())
        return warnings


def _find_in_tree(command: Command, name: str) -> Option | None:
    option = command.own_options.get(name)
    if option is not None:
        return option
    for arg in command.args:
        if arg.name == name:
            return arg
    for sub in command.sub_commands.values():
        found = _find_in_tree(sub, name)
        if found is not None:
            return found
    return None


__all__ = ["Config"]
