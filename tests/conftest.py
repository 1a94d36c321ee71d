"""Shared pytest fixtures for the resolver, option-file and CLI tests.

Centralizes test infrastructure:
- All shared fixtures live here
- Tests import fixtures implicitly via pytest's conftest discovery
- Fixtures use descriptive names that read as plain English
"""

from __future__ import annotations

import contextlib
import os
import re
import tempfile
from collections.abc import Callable, Iterator, Mapping
from dataclasses import dataclass, fields
from pathlib import Path
from typing import TYPE_CHECKING, Any

import lib_cli_exit_tools
import pytest
from click.testing import CliRunner
from lib_layered_config import Config

from optstack.domain.command import Command, new_command, new_command_suite
from optstack.domain.option import bool_option, string_option

if TYPE_CHECKING:
    from optstack.adapters.memory import ResolutionSpy, SchemaStore
    from optstack.composition import AppServices

_COVERAGE_BASENAME = ".coverage.optstack"


def _purge_stale_coverage_files(cov_path: Path) -> None:
    """Delete leftover SQLite database and journal files from crashed runs."""
    for suffix in ("", "-journal", "-wal", "-shm"):
        with contextlib.suppress(FileNotFoundError):
            Path(str(cov_path) + suffix).unlink()


def pytest_configure(config: pytest.Config) -> None:
    """Redirect the coverage database to a local temp directory.

    Runs before ``pytest-cov`` creates its ``Coverage()`` object, so the
    ``COVERAGE_FILE`` value is honoured however pytest is invoked.
    """
    if "COVERAGE_FILE" not in os.environ:
        cov_path = Path(tempfile.gettempdir()) / _COVERAGE_BASENAME
        _purge_stale_coverage_files(cov_path)
        os.environ["COVERAGE_FILE"] = str(cov_path)


ANSI_ESCAPE_PATTERN = re.compile(r"\x1B\[[0-?]*[ -/]*[@-~]")
CONFIG_FIELDS: tuple[str, ...] = tuple(field.name for field in fields(type(lib_cli_exit_tools.config)))


def _remove_ansi_codes(text: str) -> str:
    """Return *text* stripped of ANSI escape sequences."""
    return ANSI_ESCAPE_PATTERN.sub("", text)


def _snapshot_cli_config() -> dict[str, object]:
    """Capture every attribute from ``lib_cli_exit_tools.config``."""
    return {name: getattr(lib_cli_exit_tools.config, name) for name in CONFIG_FIELDS}


def _restore_cli_config(snapshot: dict[str, object]) -> None:
    """Reapply a configuration snapshot captured by ``_snapshot_cli_config``."""
    for name, value in snapshot.items():
        setattr(lib_cli_exit_tools.config, name, value)


def _build_tool_suite() -> Command:
    """Build a small command suite shared by resolver and file tests.

    Layout::

        tool (suite, version 1.2.3)
            --host/-H  string, default "localhost"
            --port     string, default "3306"
            --debug/-d bool
            --password[=value]  value-optional string
            push       leaf
                --dry-run/-n  bool
                --verify      bool, default true
                --size        string, default "1m"
                --old-flag    bool, deprecated
                <environment> required, <target> optional default "all"
            pull       leaf
                --environment  string, default "production"
                <environment>  optional
    """
    suite = new_command_suite("tool", "1.2.3", "Manages things.")
    suite.add_option(string_option("host", "H", "localhost", "Database host"))
    suite.add_option(string_option("port", "", "3306", "Database port"))
    suite.add_option(bool_option("debug", "d", False, "Enable debug output"))
    suite.add_option(string_option("password", "p", "", "Database password").value_optional())

    push = new_command("push", "Push changes", "Push changes to an environment.", lambda cfg: 0)
    push.add_option(bool_option("dry-run", "n", False, "Only print what would change"))
    push.add_option(bool_option("verify", "", True, "Verify after pushing"))
    push.add_option(string_option("size", "", "1m", "Chunk size"))
    push.add_option(bool_option("old-flag", "", False, "Legacy behaviour").mark_deprecated("Use --verify instead."))
    push.add_arg("environment", required=True)
    push.add_arg("target", "all")
    suite.add_sub_command(push)

    pull = new_command("pull", "Pull changes", "Pull changes from an environment.", lambda cfg: 0)
    pull.add_option(string_option("environment", "", "production", "Environment to pull from"))
    pull.add_arg("environment", "")
    suite.add_sub_command(pull)
    return suite


@pytest.fixture
def tool_suite() -> Command:
    """Provide a fresh ``tool`` command suite; the test owns the root."""
    return _build_tool_suite()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a fresh CliRunner per test.

    Use ``result.stdout`` for clean output (e.g., JSON parsing) so log lines
    written to stderr never contaminate it.
    """
    return CliRunner()


@pytest.fixture
def strip_ansi() -> Callable[[str], str]:
    """Return a helper that strips ANSI escape sequences from a string."""

    def _strip(value: str) -> str:
        return _remove_ansi_codes(value)

    return _strip


@pytest.fixture
def managed_traceback_state() -> Iterator[None]:
    """Reset traceback flags to a known baseline and restore after the test.

    Use this whenever a test reads or mutates the global
    ``lib_cli_exit_tools.config`` traceback flags.
    """
    lib_cli_exit_tools.reset_config()
    lib_cli_exit_tools.config.traceback = False
    lib_cli_exit_tools.config.traceback_force_color = False
    snapshot = _snapshot_cli_config()
    try:
        yield
    finally:
        _restore_cli_config(snapshot)


@pytest.fixture
def clear_config_cache() -> Iterator[None]:
    """Clear the get_config lru_cache before each test.

    Only clears before, not after, so a test that monkeypatches the loader
    does not break teardown.
    """
    from optstack.adapters.config import loader as config_mod

    config_mod.get_config.cache_clear()
    yield


@pytest.fixture
def config_factory() -> Callable[[dict[str, Any]], Config]:
    """Create real lib_layered_config Config instances from test data dicts."""

    def _factory(data: dict[str, Any]) -> Config:
        return Config(data, {})

    return _factory


@pytest.fixture
def write_file(tmp_path: Path) -> Callable[[str, str], Path]:
    """Return a helper writing UTF-8 text to ``tmp_path / name``."""

    def _write(name: str, text: str) -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@dataclass
class ToolCliContext:
    """Services factory plus the in-memory adapters it was wired with.

    Attributes:
        factory: Callable returning wired AppServices for ``cli_runner.invoke(obj=...)``.
        spy: Captures every resolution the ``resolve`` command displays.
        schemas: In-memory schemas keyed by path string.
    """

    factory: Callable[[], AppServices]
    spy: ResolutionSpy
    schemas: SchemaStore


#: Schema document matching :func:`_build_tool_suite`, as parsed TOML.
TOOL_SCHEMA: dict[str, Any] = {
    "command": {
        "name": "tool",
        "summary": "1.2.3",
        "description": "Manages things.",
        "options": [
            {"name": "host", "shorthand": "H", "default": "localhost", "description": "Database host"},
            {"name": "port", "default": 3306, "description": "Database port"},
            {"name": "debug", "shorthand": "d", "type": "bool", "description": "Enable debug output"},
            {"name": "password", "shorthand": "p", "require_value": False, "description": "Database password"},
        ],
        "subcommands": [
            {
                "name": "push",
                "summary": "Push changes",
                "options": [
                    {"name": "dry-run", "shorthand": "n", "type": "bool"},
                    {"name": "verify", "type": "bool", "default": True},
                    {"name": "size", "default": "1m"},
                    {
                        "name": "old-flag",
                        "type": "bool",
                        "deprecated": True,
                        "deprecation_details": "Use --verify instead.",
                    },
                ],
                "args": [
                    {"name": "environment", "required": True},
                    {"name": "target", "default": "all"},
                ],
            },
            {
                "name": "pull",
                "summary": "Pull changes",
                "options": [{"name": "environment", "default": "production"}],
                "args": [{"name": "environment"}],
            },
        ],
    }
}


@pytest.fixture
def tool_schema() -> dict[str, Any]:
    """Provide the ``tool`` schema document as parsed TOML."""
    return TOOL_SCHEMA


@pytest.fixture
def tool_cli_context(clear_config_cache: None) -> Callable[..., ToolCliContext]:
    """Create CLI test context with in-memory schemas and a resolution spy.

    Returns a function taking ``{path: schema_mapping}`` (defaulting to the
    ``tool`` schema under ``"tool.toml"``) and optional ``[optstack]``
    settings for the injected tool configuration.
    """
    from optstack.adapters.memory import ResolutionSpy as ResolutionSpyImpl
    from optstack.adapters.memory import SchemaStore as SchemaStoreImpl
    from optstack.composition import AppServices, build_production, build_testing

    def _create(
        schemas: Mapping[str, Mapping[str, Any]] | None = None,
        settings: Mapping[str, Any] | None = None,
    ) -> ToolCliContext:
        spy = ResolutionSpyImpl()
        store = SchemaStoreImpl(dict(schemas) if schemas is not None else {"tool.toml": TOOL_SCHEMA})
        testing = build_testing(schemas=store, spy=spy)
        services = AppServices(
            get_config=testing.get_config,
            display_config=testing.display_config,
            init_logging=build_production().init_logging,
            load_schema=testing.load_schema,
            display_resolution=testing.display_resolution,
        )
        if settings is not None:
            config = Config({"optstack": dict(settings)}, {})

            def _fake_get_config(**_kwargs: Any) -> Config:
                return config

            services = AppServices(
                get_config=_fake_get_config,
                display_config=services.display_config,
                init_logging=services.init_logging,
                load_schema=services.load_schema,
                display_resolution=services.display_resolution,
            )
        return ToolCliContext(factory=lambda: services, spy=spy, schemas=store)

    return _create


@pytest.fixture
def production_factory() -> Callable[[], AppServices]:
    """Provide the production services factory for tests."""
    from optstack.composition import build_production

    return build_production
