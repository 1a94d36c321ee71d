"""In-memory adapter implementations for testing.

Lightweight implementations of all application ports that operate entirely
in memory: no configuration discovery, no schema files, no logging framework,
no terminal output.

Contents:
    * :mod:`.config` - In-memory configuration adapters
    * :mod:`.logging` - In-memory logging adapter
    * :mod:`.report` - Resolution display spy
    * :mod:`.schema` - Schema store keyed by path
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .config import display_config_in_memory, get_config_in_memory
from .logging import init_logging_in_memory
from .report import ResolutionSpy
from .schema import SchemaStore

# Static conformance assertions
if TYPE_CHECKING:
    from optstack.application.ports import DisplayConfig, DisplayResolution, GetConfig, InitLogging, LoadSchema

    _assert_get_config: GetConfig = get_config_in_memory
    _assert_display_config: DisplayConfig = display_config_in_memory
    _assert_init_logging: InitLogging = init_logging_in_memory
    _assert_display_resolution: DisplayResolution = ResolutionSpy().display_resolution
    _assert_load_schema: LoadSchema = SchemaStore().load_schema

__all__ = [
    "ResolutionSpy",
    "SchemaStore",
    "display_config_in_memory",
    "get_config_in_memory",
    "init_logging_in_memory",
]
