"""Helpers for testing programs built on optstack.

Contents:
    * :func:`simple_config` - Config over a throwaway command, one string option per key.
    * :func:`parse_fake_cli` - tokenize a shell-like string and parse it.
    * :func:`assert_file_sets_options` / :func:`assert_file_missing_options`
    * :class:`StringMapSource` - re-exported in-memory option source.
"""

from __future__ import annotations

import shlex
from collections.abc import Mapping

from .adapters.optionfile import OptionFile
from .domain.cmdline import CommandLine, parse_cli
from .domain.command import Command, new_command
from .domain.config import Config
from .domain.option import string_option
from .domain.sources import OptionSource, StringMapSource


def simple_config(values: Mapping[str, str]) -> Config:
    """Return a Config where every key of ``values`` is a string option set to its value.

    Example:
        >>> cfg = simple_config({"host": "db1", "port": "3306"})
        >>> cfg.get_int("port")
        3306
        >>> cfg.supplied("host")
        True
    """
    command = new_command("test", "1.0", "this is for testing", None)
    for key in values:
        command.add_option(string_option(key, "", "", key))
    cli = CommandLine(invoked_as="test", command=command)
    return Config(cli, StringMapSource(dict(values)), is_test=True)


def parse_fake_cli(command: Command, command_line: str, *sources: OptionSource) -> Config:
    """Parse ``command_line`` as if the program had been invoked with it.

    The string is split with shell quoting rules; its first word stands in for
    the program name. ``sources`` are added in ascending priority.

    Raises:
        OptionError: The command line is invalid for ``command``.
    """
    config = parse_cli(command, shlex.split(command_line))
    for source in sources:
        config.add_source(source)
    config.is_test = True
    return config


def assert_file_sets_options(option_file: OptionFile, *names: str) -> None:
    """Assert that the selected sections of a parsed file set every one of ``names``."""
    for name in names:
        _, found = option_file.option_value(name)
        assert found, f"Expected {option_file} to set option {name}, but it does not"


def assert_file_missing_options(option_file: OptionFile, *names: str) -> None:
    """Assert that the selected sections of a parsed file set none of ``names``."""
    for name in names:
        _, found = option_file.option_value(name)
        assert not found, f"Expected {option_file} to NOT set option {name}, but it does"


__all__ = [
    "StringMapSource",
    "assert_file_missing_options",
    "assert_file_sets_options",
    "parse_fake_cli",
    "simple_config",
]
