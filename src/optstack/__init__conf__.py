"""Static package metadata surfaced to CLI commands and documentation.

Values are kept in sync with ``pyproject.toml``; tests guard against drift.

Contents:
    * Metadata constants (name, title, version, ...)
    * ``LAYEREDCONF_*`` identifiers for lib_layered_config path resolution
    * :func:`print_info` - render the constants for the ``info`` command
"""

from __future__ import annotations

#: Distribution name declared in ``pyproject.toml``.
name = "optstack"
#: Human-readable summary shown in CLI help output.
title = "Layered option resolution for command-line programs"
#: Current release version.
version = "0.1.0"
#: Author attribution surfaced in CLI output.
author = "optstack contributors"
#: Console-script name published by the package.
shell_command = "optstack"

#: Vendor namespace for macOS/Windows configuration directories.
LAYEREDCONF_VENDOR: str = "optstack"
#: Application name for macOS/Windows configuration directories.
LAYEREDCONF_APP: str = "optstack"
#: Slug used for Linux configuration directories and environment variable prefixes.
LAYEREDCONF_SLUG: str = "optstack"


def print_info() -> None:
    """Print the summarised metadata block used by the CLI ``info`` command.

    Example:
        >>> print_info()  # doctest: +ELLIPSIS
        Info for optstack:
        ...
    """
    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("author", author),
        ("shell_command", shell_command),
    ]
    pad = max(len(label) for label, _ in fields)
    lines = [f"Info for {name}:", ""]
    lines.extend(f"    {label.ljust(pad)} = {value}" for label, value in fields)
    print("\n".join(lines))


__all__ = [
    "LAYEREDCONF_APP",
    "LAYEREDCONF_SLUG",
    "LAYEREDCONF_VENDOR",
    "author",
    "name",
    "print_info",
    "shell_command",
    "title",
    "version",
]
