"""Option file stories: parsing, sections, filters, provenance and canonical rewriting."""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from optstack.adapters.optionfile import OptionFile
from optstack.domain.cmdline import CommandLine, parse_cli
from optstack.domain.command import Command
from optstack.domain.config import Config
from optstack.domain.errors import (
    FileParseFormatError,
    FileStateError,
    MissingSectionError,
    OptionMissingValueError,
    OptionNotDefinedError,
)
from optstack.domain.quoting import EMPTY_SENTINEL

SAMPLE = """\
# tool defaults
host=db1
debug

[production]
host = prod-db   # primary
skip-verify
password=

[staging]
port=3307
loose-future-option=1
"""

CANONICAL_SAMPLE = """\
debug
host=db1

[production]
host=prod-db
password=''
skip-verify

[staging]
port=3307
"""


def _tree_config(root: Command, *, loose: bool = False) -> Config:
    return Config(CommandLine(invoked_as=root.name, command=root), loose_file_options=loose)


@pytest.fixture
def sample_file(write_file: Callable[[str, str], Path]) -> Path:
    return write_file("tool.cnf", SAMPLE)


@pytest.fixture
def parsed_sample(sample_file: Path, tool_suite: Command) -> OptionFile:
    option_file = OptionFile(sample_file)
    option_file.parse(_tree_config(tool_suite))
    return option_file


# ======================== paths and lifecycle ========================


@pytest.mark.os_agnostic
def test_path_parts_are_joined_and_made_absolute(tmp_path: Path) -> None:
    """Path components join into one absolute path."""
    option_file = OptionFile(tmp_path, "conf", "tool.cnf")

    assert option_file.path == tmp_path / "conf" / "tool.cnf"
    assert option_file.dir == tmp_path / "conf"
    assert option_file.name == "tool.cnf"
    assert str(option_file) == str(tmp_path / "conf" / "tool.cnf")
    assert not option_file.exists()


@pytest.mark.os_agnostic
def test_option_value_before_parse_is_fatal(sample_file: Path) -> None:
    """Reading values from an unparsed file is a programmer error."""
    with pytest.raises(FileStateError, match="unparsed file"):
        OptionFile(sample_file).option_value("host")


@pytest.mark.os_agnostic
def test_parsing_a_missing_file_raises_file_not_found(tmp_path: Path, tool_suite: Command) -> None:
    """Parse reads from disk first when nothing was loaded."""
    with pytest.raises(FileNotFoundError):
        OptionFile(tmp_path / "absent.cnf").parse(_tree_config(tool_suite))


@pytest.mark.os_agnostic
def test_load_text_parses_without_touching_disk(tmp_path: Path, tool_suite: Command) -> None:
    """In-memory contents stand in for the file."""
    option_file = OptionFile(tmp_path / "virtual.cnf")
    option_file.load_text("port=1234\n")

    option_file.parse(_tree_config(tool_suite))

    assert option_file.option_value("port") == ("1234", True)
    assert not option_file.exists()


# ======================== parsing ========================


@pytest.mark.os_agnostic
def test_parse_collects_sections_and_selects_the_unnamed_one(parsed_sample: OptionFile) -> None:
    """After parsing only the unnamed section is consulted."""
    assert [section.name for section in parsed_sample.sections] == ["", "production", "staging"]
    assert parsed_sample.selected == ("",)
    assert parsed_sample.option_value("host") == ("db1", True)
    assert parsed_sample.option_value("debug") == ("1", True)
    assert parsed_sample.option_value("port") == ("", False)


@pytest.mark.os_agnostic
def test_values_are_trimmed_and_inline_comments_dropped(parsed_sample: OptionFile) -> None:
    """Whitespace around = and trailing comments are not part of values."""
    assert parsed_sample.section_values("production")["host"] == "prod-db"


@pytest.mark.os_agnostic
def test_negated_bare_key_stores_zero(parsed_sample: OptionFile) -> None:
    """skip-verify in a file stores 0, for an option of another sub-command."""
    assert parsed_sample.section_values("production")["verify"] == "0"


@pytest.mark.os_agnostic
def test_explicit_empty_value_is_stored_as_the_sentinel(parsed_sample: OptionFile) -> None:
    """name= on a string option is distinguishable from a bare name."""
    assert parsed_sample.section_values("production")["password"] == EMPTY_SENTINEL


@pytest.mark.os_agnostic
def test_bare_value_optional_key_stores_empty_string(tmp_path: Path, tool_suite: Command) -> None:
    """A bare value-optional string option stores the empty string."""
    option_file = OptionFile(tmp_path / "t.cnf")
    option_file.load_text("password\n")
    option_file.parse(_tree_config(tool_suite))

    assert option_file.option_value("password") == ("", True)


@pytest.mark.os_agnostic
def test_loose_unknown_options_are_skipped(parsed_sample: OptionFile) -> None:
    """A loose- prefix lets a file mention options the program lacks."""
    assert "future-option" not in parsed_sample.section_values("staging")


@pytest.mark.os_agnostic
def test_unknown_option_reports_file_and_line(write_file: Callable[[str, str], Path], tool_suite: Command) -> None:
    """Strict parsing names the offending location."""
    path = write_file("bad.cnf", "host=x\n\nfrobnicate=1\n")

    with pytest.raises(OptionNotDefinedError) as exc:
        OptionFile(path).parse(_tree_config(tool_suite))

    assert exc.value.name == "frobnicate"
    assert exc.value.source == f"{path} line 3"


@pytest.mark.os_agnostic
def test_unknown_options_are_skipped_when_ignored(write_file: Callable[[str, str], Path], tool_suite: Command) -> None:
    """Either the file flag or the Config flag skips unknown options."""
    path = write_file("loose.cnf", "frobnicate=1\nhost=x\n")

    by_file = OptionFile(path, ignore_unknown_options=True)
    by_file.parse(_tree_config(tool_suite))
    by_config = OptionFile(path)
    by_config.parse(_tree_config(tool_suite, loose=True))

    for option_file in (by_file, by_config):
        assert option_file.section_values("") == {"host": "x"}


@pytest.mark.os_agnostic
def test_bare_value_required_key_is_an_error(write_file: Callable[[str, str], Path], tool_suite: Command) -> None:
    """host needs a value; a bare host line fails."""
    path = write_file("bare.cnf", "[x]\nhost\n")

    with pytest.raises(OptionMissingValueError) as exc:
        OptionFile(path).parse(_tree_config(tool_suite))

    assert exc.value.source == f"{path} line 2"


@pytest.mark.os_agnostic
def test_malformed_line_raises_with_line_number(write_file: Callable[[str, str], Path], tool_suite: Command) -> None:
    """Syntax errors carry the path and 1-based line number."""
    path = write_file("broken.cnf", "host=x\n[production\n")

    with pytest.raises(FileParseFormatError) as exc:
        OptionFile(path).parse(_tree_config(tool_suite))

    assert exc.value.line_number == 2
    assert exc.value.path == str(path)
    assert "unterminated section name" in str(exc.value)


@pytest.mark.os_agnostic
def test_byte_order_mark_and_crlf_are_tolerated(tmp_path: Path, tool_suite: Command) -> None:
    """Files saved by Windows editors parse like any other."""
    path = tmp_path / "windows.cnf"
    path.write_bytes("\ufeffhost=win\r\n[production]\r\nport=1\r\n".encode())

    option_file = OptionFile(path)
    option_file.parse(_tree_config(tool_suite))

    assert option_file.option_value("host") == ("win", True)
    assert option_file.section_values("production") == {"port": "1"}


# ======================== sections ========================


@pytest.mark.os_agnostic
def test_use_section_gives_named_sections_priority(parsed_sample: OptionFile) -> None:
    """Listed sections win, with the unnamed section as fallback."""
    parsed_sample.use_section("staging", "production")

    assert parsed_sample.selected == ("staging", "production", "")
    assert parsed_sample.option_value("host") == ("prod-db", True)
    assert parsed_sample.option_value("port") == ("3307", True)
    assert parsed_sample.option_value("debug") == ("1", True)


@pytest.mark.os_agnostic
def test_use_section_reports_missing_sections_but_still_applies(parsed_sample: OptionFile) -> None:
    """Missing sections raise after the selection is applied."""
    with pytest.raises(MissingSectionError) as exc:
        parsed_sample.use_section("qa", "production", "qa")

    assert exc.value.names == ["qa"]
    assert parsed_sample.selected == ("qa", "production", "")
    assert parsed_sample.option_value("host") == ("prod-db", True)


@pytest.mark.os_agnostic
def test_section_queries(parsed_sample: OptionFile) -> None:
    """Sections can be searched for options."""
    assert parsed_sample.has_section("staging")
    assert not parsed_sample.has_section("qa")
    assert parsed_sample.sections_with_option("host") == ["", "production"]
    assert parsed_sample.some_section_has_option("port")
    assert not parsed_sample.some_section_has_option("size")
    assert parsed_sample.section_values("qa") == {}


@pytest.mark.os_agnostic
def test_section_values_is_a_copy(parsed_sample: OptionFile) -> None:
    """Mutating the returned mapping leaves the file alone."""
    parsed_sample.section_values("")["host"] = "changed"

    assert parsed_sample.option_value("host") == ("db1", True)


@pytest.mark.os_agnostic
def test_set_and_unset_option_values(parsed_sample: OptionFile) -> None:
    """In-memory edits create sections as needed."""
    parsed_sample.set_option_value("qa", "port", "9999")
    parsed_sample.unset_option_value("", "host")
    parsed_sample.use_section("qa")

    assert parsed_sample.option_value("port") == ("9999", True)
    assert parsed_sample.option_value("host") == ("", False)


# ======================== filters ========================


@pytest.mark.os_agnostic
def test_ignore_options_drops_named_options(sample_file: Path, tool_suite: Command) -> None:
    """Ignored options never reach any section."""
    option_file = OptionFile(sample_file)
    option_file.ignore_options("host")
    option_file.parse(_tree_config(tool_suite))

    assert not option_file.some_section_has_option("host")
    assert option_file.some_section_has_option("port")


@pytest.mark.os_agnostic
def test_limit_options_keeps_only_named_options(sample_file: Path, tool_suite: Command) -> None:
    """Limits are additive and exclude everything else."""
    option_file = OptionFile(sample_file)
    option_file.limit_options("port")
    option_file.limit_options("debug")
    option_file.parse(_tree_config(tool_suite))

    assert option_file.section_values("") == {"debug": "1"}
    assert option_file.section_values("staging") == {"port": "3307"}
    assert option_file.section_values("production") == {}


@pytest.mark.os_agnostic
def test_ignore_and_limit_override_each_other(sample_file: Path, tool_suite: Command) -> None:
    """The later call decides for a name in both lists."""
    option_file = OptionFile(sample_file)
    option_file.limit_options("host", "port")
    option_file.ignore_options("host")
    option_file.parse(_tree_config(tool_suite))

    assert not option_file.some_section_has_option("host")
    assert option_file.some_section_has_option("port")


@pytest.mark.os_agnostic
@pytest.mark.parametrize("method", ["ignore_options", "limit_options"])
def test_filters_after_parse_are_fatal(parsed_sample: OptionFile, method: str) -> None:
    """Filters only apply before parsing."""
    with pytest.raises(FileStateError, match="already been parsed"):
        getattr(parsed_sample, method)("host")


# ======================== as a Config source ========================


@pytest.mark.os_agnostic
def test_file_values_sit_between_defaults_and_command_line(parsed_sample: OptionFile, tool_suite: Command) -> None:
    """Files override defaults; the command line overrides files."""
    config = parse_cli(tool_suite, ["tool", "push", "--port=1", "prod"])
    parsed_sample.use_section("production")
    config.add_source(parsed_sample)

    assert config.get("host") == "prod-db"
    assert config.source("host") is parsed_sample
    assert config.get("port") == "1"
    assert config.on_cli("port")
    assert config.get_bool("verify") is False
    assert config.changed("verify")
    assert config.get("size") == "1m"
    assert not config.supplied("size")


@pytest.mark.os_agnostic
def test_file_edits_require_mark_dirty(parsed_sample: OptionFile, tool_suite: Command) -> None:
    """The resolver cache only notices in-place edits after mark_dirty."""
    config = parse_cli(tool_suite, ["tool", "push", "prod"])
    config.add_source(parsed_sample)
    assert config.get("host") == "db1"

    parsed_sample.set_option_value("", "host", "db2")
    assert config.get("host") == "db1"

    config.mark_dirty()
    assert config.get("host") == "db2"


@pytest.mark.os_agnostic
def test_deprecated_options_in_files_warn(write_file: Callable[[str, str], Path], tool_suite: Command) -> None:
    """Deprecated options are reported with the file path."""
    path = write_file("old.cnf", "[push]\nold-flag\n")
    option_file = OptionFile(path)
    option_file.parse(_tree_config(tool_suite))

    assert option_file.deprecation_warnings() == [f"{path}: Option old-flag is deprecated. Use --verify instead."]


@pytest.mark.os_agnostic
def test_deprecation_warnings_before_parse_are_fatal(sample_file: Path) -> None:
    """Warnings need parsed content."""
    with pytest.raises(FileStateError):
        OptionFile(sample_file).deprecation_warnings()


# ======================== comparing and writing ========================


@pytest.mark.os_agnostic
def test_render_produces_canonical_text(parsed_sample: OptionFile) -> None:
    """Keys are sorted, booleans canonical, comments gone."""
    assert parsed_sample.render() == CANONICAL_SAMPLE


@pytest.mark.os_agnostic
def test_written_file_parses_back_to_the_same_contents(
    parsed_sample: OptionFile, tmp_path: Path, tool_suite: Command
) -> None:
    """Writing then re-reading preserves every section and value."""
    copy = parsed_sample.copy_to(tmp_path, "out.cnf")
    copy.write()

    reread = OptionFile(tmp_path / "out.cnf")
    reread.parse(_tree_config(tool_suite))

    assert (tmp_path / "out.cnf").read_text(encoding="utf-8") == CANONICAL_SAMPLE
    assert reread.same_contents(parsed_sample)


@pytest.mark.os_agnostic
def test_same_contents_ignores_formatting_but_not_values(
    write_file: Callable[[str, str], Path], tool_suite: Command
) -> None:
    """Comments and spacing do not matter; values do."""
    config = _tree_config(tool_suite)
    first = OptionFile(write_file("a.cnf", "host=x # c\n[s]\nport=1\n"))
    second = OptionFile(write_file("b.cnf", "[s]\n  port = 1\n"))
    third = OptionFile(write_file("c.cnf", "host=y\n[s]\nport=1\n"))
    for option_file in (first, second, third):
        option_file.parse(config)
    second.set_option_value("", "host", "x")

    assert first.same_contents(second)
    assert not first.same_contents(third)


@pytest.mark.os_agnostic
def test_same_contents_requires_parsed_files(parsed_sample: OptionFile, sample_file: Path) -> None:
    """Comparing with an unparsed file is a programmer error."""
    with pytest.raises(FileStateError):
        parsed_sample.same_contents(OptionFile(sample_file))


@pytest.mark.os_agnostic
def test_copy_to_requires_a_parsed_file(sample_file: Path, tmp_path: Path) -> None:
    """Only parsed content can be copied."""
    with pytest.raises(FileStateError):
        OptionFile(sample_file).copy_to(tmp_path / "copy.cnf")


@pytest.mark.os_agnostic
def test_write_refuses_to_overwrite_without_permission(parsed_sample: OptionFile, sample_file: Path) -> None:
    """An existing file is only replaced when overwrite is requested."""
    with pytest.raises(FileExistsError):
        parsed_sample.write()

    parsed_sample.write(overwrite=True)

    assert sample_file.read_text(encoding="utf-8") == CANONICAL_SAMPLE


@pytest.mark.os_agnostic
def test_empty_configuration_is_not_written(
    tmp_path: Path, tool_suite: Command, caplog: pytest.LogCaptureFixture
) -> None:
    """Nothing to write means no file and a warning."""
    option_file = OptionFile(tmp_path / "empty.cnf")
    option_file.load_text("# only a comment\n")
    option_file.parse(_tree_config(tool_suite))

    with caplog.at_level(logging.WARNING):
        option_file.write()

    assert not (tmp_path / "empty.cnf").exists()
    assert "empty configuration" in caplog.text


@pytest.mark.os_agnostic
def test_render_of_programmatic_values_without_definitions(tmp_path: Path, tool_suite: Command) -> None:
    """Values set without a known option render as plain strings."""
    option_file = OptionFile(tmp_path / "new.cnf")
    option_file.load_text("")
    option_file.parse(_tree_config(tool_suite))
    option_file.set_option_value("", "flag", "")
    option_file.set_option_value("client", "user", "root")

    assert option_file.render() == "flag\n\n[client]\nuser=root\n"
