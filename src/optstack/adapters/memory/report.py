"""In-memory resolution display for testing.

Contents:
    * :class:`ResolutionSpy` - Captures rendered resolutions for assertions.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ...application.resolution import Resolution
from ...domain.enums import OutputFormat


def _empty_displays() -> list[tuple[Resolution, OutputFormat]]:
    return []


@dataclass
class ResolutionSpy:
    """Records every resolution passed to :meth:`display_resolution`.

    Each test should create its own spy to avoid cross-test pollution.

    Example:
        >>> spy = ResolutionSpy()
        >>> spy.display_resolution(Resolution("tool", "tool [<options>]"))
        >>> spy.last.command
        'tool'
    """

    displayed: list[tuple[Resolution, OutputFormat]] = field(default_factory=_empty_displays)

    @property
    def last(self) -> Resolution:
        """The most recently displayed resolution.

        Raises:
            IndexError: Nothing was displayed.
        """
        return self.displayed[-1][0]

    def clear(self) -> None:
        self.displayed.clear()

    def display_resolution(self, resolution: Resolution, *, output_format: OutputFormat = OutputFormat.HUMAN) -> None:
        self.displayed.append((resolution, output_format))


__all__ = ["ResolutionSpy"]
