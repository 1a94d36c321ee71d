"""Protocols for option value providers.

Any object with an ``option_value`` method can act as a source for a
:class:`~optstack.domain.config.Config`: commands (defaults), option files,
the parsed command line, and the trivial :class:`StringMapSource`.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol, runtime_checkable


@runtime_checkable
class OptionSource(Protocol):
    """Anything that may hold a value for a named option."""

    def option_value(self, name: str) -> tuple[str, bool]:
        """Return ``(value, True)`` if the source sets ``name``, else ``("", False)``."""
        ...


@runtime_checkable
class DeprecationWarner(Protocol):
    """Anything that can report use of deprecated options."""

    def deprecation_warnings(self) -> list[str]: ...


class StringMapSource:
    """Option source backed by a plain mapping of name to raw value.

    Example:
        >>> src = StringMapSource({"host": "db1"})
        >>> src.option_value("host")
        ('db1', True)
        >>> src.option_value("port")
        ('', False)
    """

    __slots__ = ("values", "label")

    def __init__(self, values: Mapping[str, str] | None = None, label: str = "runtime values") -> None:
        self.values: dict[str, str] = dict(values or {})
        self.label = label

    def option_value(self, name: str) -> tuple[str, bool]:
        if name in self.values:
            return self.values[name], True
        return "", False

    def __str__(self) -> str:
        return self.label

    def __repr__(self) -> str:
        return f"StringMapSource({self.values!r}, label={self.label!r})"


__all__ = [
    "DeprecationWarner",
    "OptionSource",
    "StringMapSource",
]
