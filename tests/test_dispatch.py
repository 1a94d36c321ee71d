"""Dispatch stories: built-in help and version, handler routing and usage text."""

from __future__ import annotations

import pytest

from optstack.application.dispatch import (
    handle_command,
    help_handler,
    render_usage,
    requests_builtin,
    version_handler,
)
from optstack.domain.cmdline import parse_cli
from optstack.domain.command import Command, new_command
from optstack.domain.config import Config
from optstack.domain.errors import CommandDefinitionError, UnknownCommandError


class Recorder:
    """Collects echoed text."""

    def __init__(self) -> None:
        self.lines: list[str] = []

    def __call__(self, text: str) -> None:
        self.lines.append(text)

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


# ======================== render_usage ========================


@pytest.mark.os_agnostic
def test_suite_usage_lists_commands_and_option_groups(tool_suite: Command) -> None:
    """Suite help shows the invocation, sub-commands and grouped options."""
    usage = render_usage(tool_suite)

    assert "Usage:  tool [<options>] <command>" in usage
    assert "Manages things." in usage
    assert "Commands:" in usage
    assert "push     Push changes" in usage
    assert "\nOptions:\n" in usage
    assert "Global Options:" in usage
    assert '-H, --host value' in usage
    assert '(default "localhost")' in usage
    assert "--password[=value]" in usage


@pytest.mark.os_agnostic
def test_sub_command_usage_names_its_unnamed_group_after_itself(tool_suite: Command) -> None:
    """Ungrouped options of a sub-command appear under its own title."""
    usage = render_usage(tool_suite.sub_commands["push"])

    assert "Usage:  tool push [<options>] <environment> [<target>]" in usage
    assert "Push Options:" in usage
    assert "--[skip-]verify" in usage
    assert "(enabled by default; disable with --skip-verify)" in usage
    assert "Commands:" not in usage


@pytest.mark.os_agnostic
def test_usage_leaves_out_hidden_options(tool_suite: Command) -> None:
    """Hidden options never appear in help."""
    tool_suite.own_options["password"].hidden()

    assert "password" not in render_usage(tool_suite)


@pytest.mark.os_agnostic
def test_usage_ends_with_web_docs_when_available(tool_suite: Command) -> None:
    """An online documentation pointer closes the help text."""
    tool_suite.web_doc_url = "https://docs.example.com/tool"

    usage = render_usage(tool_suite.sub_commands["pull"])

    assert usage.rstrip().endswith("https://docs.example.com/tool/pull")


# ======================== help and version ========================


@pytest.mark.os_agnostic
def test_help_command_with_a_name_shows_that_sub_command(tool_suite: Command) -> None:
    """tool help push prints push's usage."""
    echo = Recorder()

    assert help_handler(parse_cli(tool_suite, ["tool", "help", "push"]), echo) == 0
    assert "Usage:  tool push" in echo.text


@pytest.mark.os_agnostic
def test_help_command_without_a_name_shows_the_suite(tool_suite: Command) -> None:
    """tool help prints the suite's usage."""
    echo = Recorder()

    help_handler(parse_cli(tool_suite, ["tool", "help"]), echo)

    assert "Usage:  tool [<options>] <command>" in echo.text


@pytest.mark.os_agnostic
def test_help_for_an_unknown_command_fails(tool_suite: Command) -> None:
    """Naming a missing sub-command is an error."""
    with pytest.raises(UnknownCommandError, match='"deploy"'):
        help_handler(parse_cli(tool_suite, ["tool", "help", "deploy"]), Recorder())


@pytest.mark.os_agnostic
def test_help_accepts_a_quoted_command_name(tool_suite: Command) -> None:
    """Quotes around the sub-command name are ignored."""
    echo = Recorder()

    help_handler(parse_cli(tool_suite, ["tool", "help", "'pull'"]), echo)

    assert "Usage:  tool pull" in echo.text


@pytest.mark.os_agnostic
def test_version_handler_uses_the_root_summary(tool_suite: Command) -> None:
    """The root command's summary is the version."""
    echo = Recorder()

    version_handler(parse_cli(tool_suite, ["tool", "push", "prod"]), echo)

    assert echo.lines == ["tool version 1.2.3"]


@pytest.mark.os_agnostic
def test_version_handler_without_a_version() -> None:
    """A root without summary reports that no version is set."""
    echo = Recorder()

    version_handler(parse_cli(new_command("tool", "", "", None), ["tool"]), echo)

    assert echo.lines == ["tool version not specified"]


# ======================== requests_builtin ========================


@pytest.mark.os_agnostic
@pytest.mark.parametrize(
    ("argv", "expected"),
    [
        (["tool"], True),
        (["tool", "help"], True),
        (["tool", "version"], True),
        (["tool", "--version"], True),
        (["tool", "push", "-?", "prod"], True),
        (["tool", "push", "--skip-version", "prod"], False),
        (["tool", "push", "prod"], False),
    ],
)
def test_requests_builtin(tool_suite: Command, argv: list[str], expected: bool) -> None:
    """Help and version requests are recognised in every form."""
    assert requests_builtin(parse_cli(tool_suite, argv)) is expected


# ======================== handle_command ========================


@pytest.mark.os_agnostic
def test_handle_command_runs_the_leaf_handler() -> None:
    """The selected command's handler receives the Config and sets the exit code."""
    seen: list[Config] = []

    def handler(config: Config) -> int:
        seen.append(config)
        return 3

    command = new_command("tool", "1.0", "", handler)
    config = parse_cli(command, ["tool"])

    assert handle_command(config, Recorder()) == 3
    assert seen == [config]


@pytest.mark.os_agnostic
def test_help_option_takes_priority_over_the_handler(tool_suite: Command) -> None:
    """--help=push shows push's help instead of running anything."""
    echo = Recorder()

    assert handle_command(parse_cli(tool_suite, ["tool", "--help=push"]), echo) == 0
    assert "Usage:  tool push" in echo.text


@pytest.mark.os_agnostic
def test_help_option_on_a_leaf_shows_its_usage(tool_suite: Command) -> None:
    """tool push --help shows push's help."""
    echo = Recorder()

    handle_command(parse_cli(tool_suite, ["tool", "push", "--help"]), echo)

    assert "Usage:  tool push" in echo.text


@pytest.mark.os_agnostic
@pytest.mark.parametrize("argv", [["tool", "--version"], ["tool", "version"]])
def test_version_requests_print_the_version(tool_suite: Command, argv: list[str]) -> None:
    """--version and the version command agree."""
    echo = Recorder()

    handle_command(parse_cli(tool_suite, argv), echo)

    assert echo.lines == ["tool version 1.2.3"]


@pytest.mark.os_agnostic
def test_bare_suite_prints_its_help(tool_suite: Command) -> None:
    """Running a suite alone prints its usage."""
    echo = Recorder()

    handle_command(parse_cli(tool_suite, ["tool"]), echo)

    assert "Commands:" in echo.text


@pytest.mark.os_agnostic
def test_command_without_handler_is_fatal() -> None:
    """A leaf with no handler cannot be dispatched."""
    command = new_command("tool", "1.0", "", None)

    with pytest.raises(CommandDefinitionError, match="has no handler"):
        handle_command(parse_cli(command, ["tool"]), Recorder())
