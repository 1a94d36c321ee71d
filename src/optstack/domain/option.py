"""Option definitions and the option-token normalizer.

Contents:
    * :class:`Option` - one named setting with builder-style modifiers.
    * :func:`string_option` / :func:`bool_option` - constructors.
    * :func:`normalize_option_token` - raw ``name[=value]`` to canonical parts.
    * :func:`bool_value` - the truthiness rule shared by every getter.

System Role:
    Leaf of the domain layer. Commands, the command-line tokenizer, the option
    file parser and the resolver all depend on these definitions; nothing here
    performs I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from .enums import OptionType
from .errors import CommandDefinitionError

_FALSY_VALUES = frozenset({"", "off", "false", "0"})

LOOSE_PREFIX = "loose-"
NEGATION_PREFIXES = ("skip-", "disable-")
ENABLE_PREFIX = "enable-"


@dataclass(slots=True, eq=False)
class Option:
    """A flag or setting accepted by a command.

    Options declared on a parent command are inherited by every descendant,
    though a descendant may redeclare an option of the same name to override
    its semantics. Instances compare by identity so that callers can tell
    apart two definitions sharing a name in different command hierarchies.

    Attributes:
        name: Canonical name (lowercase, dash-separated).
        shorthand: Single-character short form, or ``""`` for none.
        kind: :class:`OptionType` of the value.
        default: Default value, string encoded. Booleans use ``"0"``/``"1"``.
        description: One-line help text.
        require_value: Whether a bare occurrence is an error.
        hidden_on_cli: Whether help output omits the option.
        group: Help-display grouping label.
        deprecated: Whether use of the option should produce a warning.
        deprecation_details: Free text appended to deprecation warnings.
    """

    name: str
    shorthand: str = ""
    kind: OptionType = OptionType.STRING
    default: str = ""
    description: str = ""
    require_value: bool = True
    hidden_on_cli: bool = False
    group: str = ""
    deprecated: bool = False
    deprecation_details: str = ""

    def hidden(self) -> Option:
        """Omit the option from help output."""
        self.hidden_on_cli = True
        return self

    def value_required(self) -> Option:
        """Make a bare occurrence of the option an error.

        Raises:
            CommandDefinitionError: If the option is boolean.
        """
        if self.kind is OptionType.BOOL:
            raise CommandDefinitionError(f"Option {self.name}: boolean options cannot have required value")
        self.require_value = True
        return self

    def value_optional(self) -> Option:
        """Allow the option to appear without any value."""
        self.require_value = False
        return self

    def mark_deprecated(self, details: str = "") -> Option:
        """Flag the option as deprecated, with optional guidance text."""
        self.deprecated = True
        self.deprecation_details = details
        return self

    @property
    def is_bool(self) -> bool:
        return self.kind is OptionType.BOOL

    def has_nonzero_default(self) -> bool:
        """Return True if the default differs from the kind's zero value.

        Example:
            >>> bool_option("debug", "", True).has_nonzero_default()
            True
            >>> string_option("host", "", "").has_nonzero_default()
            False
        """
        if self.is_bool:
            return bool_value(self.default)
        return self.default != ""

    def printable_default(self) -> str:
        """Return a human-friendly rendering of the default value."""
        if self.is_bool:
            return "true" if bool_value(self.default) else "false"
        return f'"{self.default}"'

    def usage_name(self) -> str:
        """Return the option name annotated for help display."""
        if self.hidden_on_cli:
            return ""
        if self.is_bool:
            return f"[skip-]{self.name}" if self.has_nonzero_default() else self.name
        if self.require_value:
            return f"{self.name} value"
        return f"{self.name}[=value]"

    def default_usage(self) -> str:
        """Return the help suffix describing the default value."""
        if self.hidden_on_cli or not self.has_nonzero_default():
            return ""
        if self.is_bool:
            return f" (enabled by default; disable with --skip-{self.name})"
        return f" (default {self.printable_default()})"


def _canonical_name(name: str) -> str:
    return name.replace("_", "-")


def _check_shorthand(name: str, shorthand: str) -> str:
    if len(shorthand) > 1:
        raise CommandDefinitionError(f"Option {name}: shorthand must be a single character, got {shorthand!r}")
    return shorthand


def string_option(name: str, shorthand: str = "", default: str = "", description: str = "") -> Option:
    """Create a string option. String options require a value by default.

    Example:
        >>> opt = string_option("temp_schema", "t", "_tmp", "Temp schema name")
        >>> opt.name, opt.require_value
        ('temp-schema', True)
        >>> string_option("password", "p").value_optional().require_value
        False
    """
    return Option(
        name=_canonical_name(name),
        shorthand=_check_shorthand(name, shorthand),
        kind=OptionType.STRING,
        default=default,
        description=description,
        require_value=True,
    )


def bool_option(name: str, shorthand: str = "", default: bool = False, description: str = "") -> Option:
    """Create a boolean option, whose default is encoded as ``"1"`` or ``"0"``.

    Example:
        >>> bool_option("dry-run", "n").default
        '0'
        >>> bool_option("verify", "", True).default
        '1'
    """
    return Option(
        name=_canonical_name(name),
        shorthand=_check_shorthand(name, shorthand),
        kind=OptionType.BOOL,
        default="1" if default else "0",
        description=description,
        require_value=False,
    )


def bool_value(value: str) -> bool:
    """Convert an option value string to a boolean.

    The case-insensitive values ``""``, ``off``, ``false`` and ``0`` are false;
    everything else is true.

    Example:
        >>> [bool_value(v) for v in ("", "OFF", "False", "0", "1", "yes", "00")]
        [False, False, False, False, True, True, True]
    """
    return value.lower() not in _FALSY_VALUES


class OptionToken(NamedTuple):
    """Normalized form of a ``name[=value]`` token."""

    key: str
    value: str
    has_value: bool
    loose: bool


def normalize_option_token(token: str) -> OptionToken:
    """Split and canonicalize an option token such as ``skip-foo=bar``.

    The key is trimmed, lowercased and has underscores replaced with dashes.
    A ``loose-`` prefix is stripped and reported, authorizing the caller to
    ignore the option if it is unknown. A ``skip-`` or ``disable-`` prefix
    negates the value; ``enable-`` is accepted as a no-op alias.

    Args:
        token: Raw token without any leading dashes.

    Returns:
        :class:`OptionToken`. ``has_value`` distinguishes ``foo`` from
        ``foo=``; negation counts as supplying a value.

    Example:
        >>> normalize_option_token("Skip_Foo")
        OptionToken(key='foo', value='0', has_value=True, loose=False)
        >>> normalize_option_token("skip-foo=off")
        OptionToken(key='foo', value='1', has_value=True, loose=False)
        >>> normalize_option_token("loose-enable-bar = baz ")
        OptionToken(key='bar', value='baz', has_value=True, loose=True)
        >>> normalize_option_token("foo")
        OptionToken(key='foo', value='', has_value=False, loose=False)
    """
    raw_key, sep, raw_value = token.partition("=")
    key = raw_key.strip()
    if not key:
        return OptionToken("", "", False, False)
    key = key.lower().replace("_", "-")

    loose = False
    if key.startswith(LOOSE_PREFIX):
        key = key[len(LOOSE_PREFIX) :]
        loose = True

    negated = False
    for prefix in NEGATION_PREFIXES:
        if key.startswith(prefix):
            key = key[len(prefix) :]
            negated = True
            break
    else:
        if key.startswith(ENABLE_PREFIX):
            key = key[len(ENABLE_PREFIX) :]

    if sep:
        value = raw_value.strip()
        # negated with a falsy value is a double negative, meaning enable
        if negated:
            value = "0" if bool_value(value) else "1"
        return OptionToken(key, value, True, loose)
    if negated:
        return OptionToken(key, "0", True, loose)
    return OptionToken(key, "", False, loose)


def normalize_option_name(name: str) -> str:
    """Return only the canonical key portion of :func:`normalize_option_token`.

    Example:
        >>> normalize_option_name("LOOSE_Skip_Reuse_Temp_Schema")
        'reuse-temp-schema'
    """
    return normalize_option_token(name).key


__all__ = [
    "Option",
    "OptionToken",
    "bool_option",
    "bool_value",
    "normalize_option_name",
    "normalize_option_token",
    "string_option",
]
