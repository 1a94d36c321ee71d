"""Resolution snapshots - what each option resolved to and where it came from.

Contents:
    * :class:`ResolvedValue` - one option or positional arg.
    * :class:`Resolution` - all values for the active command.
    * :func:`resolve_all` - snapshot a Config.

System Role:
    Read model consumed by the report adapters; the Config itself stays the
    single source of truth.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..domain.config import Config


@dataclass(frozen=True, slots=True)
class ResolvedValue:
    """Resolved state of one name.

    Attributes:
        name: Option or positional arg name.
        value: Value with surrounding quotes removed.
        raw: Value exactly as stored by the winning source.
        source: Label of the winning source, e.g. ``command line`` or a file path.
        supplied: Whether anything other than the defaults set the value.
        changed: Whether the value differs from the default.
        positional: Whether ``name`` is a positional arg rather than an option.
    """

    name: str
    value: str
    raw: str
    source: str
    supplied: bool
    changed: bool
    positional: bool = False


def _empty_values() -> tuple[ResolvedValue, ...]:
    return ()


def _empty_warnings() -> tuple[str, ...]:
    return ()


@dataclass(frozen=True, slots=True)
class Resolution:
    """Snapshot of every value visible to the active command."""

    command: str
    invocation: str
    values: tuple[ResolvedValue, ...] = field(default_factory=_empty_values)
    warnings: tuple[str, ...] = field(default_factory=_empty_warnings)

    def as_dict(self) -> dict[str, object]:
        """Return a JSON-ready mapping.

        Example:
            >>> Resolution("tool", "tool [<options>]").as_dict()["values"]
            {}
        """
        return {
            "command": self.command,
            "invocation": self.invocation,
            "values": {
                item.name: {
                    "value": item.value,
                    "raw": item.raw,
                    "source": item.source,
                    "supplied": item.supplied,
                    "changed": item.changed,
                    "positional": item.positional,
                }
                for item in self.values
            },
            "warnings": list(self.warnings),
        }


def resolve_all(config: Config, *, include_hidden: bool = False) -> Resolution:
    """Resolve every positional arg and option of the active command.

    Positional args come first in declaration order, then options sorted by
    name. Hidden options are left out unless ``include_hidden`` is set.
    """
    command = config.cli.command
    options = command.options()
    supplied_args = len(config.cli.arg_values)
    shadowing = {arg.name for arg in command.args[:supplied_args]}
    values: list[ResolvedValue] = []
    for position, arg in enumerate(command.args):
        if position >= supplied_args and arg.name in options:
            # an unsupplied positional defers to the same-named option
            continue
        supplied = config.supplied(arg.name)
        values.append(
            ResolvedValue(
                name=arg.name,
                value=config.get(arg.name),
                raw=config.get_raw(arg.name),
                source=str(config.source(arg.name)),
                supplied=supplied,
                changed=supplied and config.get(arg.name) != arg.default,
                positional=True,
            )
        )

    for name, option in sorted(options.items()):
        if option.hidden_on_cli and not include_hidden:
            continue
        if name in shadowing:
            # shadowed by the supplied positional of the same name
            continue
        values.append(
            ResolvedValue(
                name=name,
                value=config.get(name),
                raw=config.get_raw(name),
                source=str(config.source(name)),
                supplied=config.supplied(name),
                changed=config.changed(name),
            )
        )

    return Resolution(
        command=command.name,
        invocation=command.invocation(),
        values=tuple(values),
        warnings=tuple(config.deprecation_warnings()),
    )


__all__ = [
    "Resolution",
    "ResolvedValue",
    "resolve_all",
]
