"""Composition root wiring adapters to application ports."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

# Configuration services
from ..adapters.config.display import display_config
from ..adapters.config.loader import get_config

# Logging services
from ..adapters.logging.setup import init_logging

# Resolution services
from ..adapters.report.display import display_resolution
from ..adapters.schema.loader import load_schema

# Static conformance assertions - the type checker verifies that each adapter
# function structurally satisfies its Protocol.
if TYPE_CHECKING:
    from ..adapters.memory import ResolutionSpy, SchemaStore
    from ..application.ports import (
        DisplayConfig,
        DisplayResolution,
        GetConfig,
        InitLogging,
        LoadSchema,
    )

    _assert_get_config: GetConfig = get_config
    _assert_display_config: DisplayConfig = display_config
    _assert_init_logging: InitLogging = init_logging
    _assert_load_schema: LoadSchema = load_schema
    _assert_display_resolution: DisplayResolution = display_resolution


@dataclass(frozen=True, slots=True)
class AppServices:
    """Frozen container holding all application port implementations."""

    get_config: GetConfig
    display_config: DisplayConfig
    init_logging: InitLogging
    load_schema: LoadSchema
    display_resolution: DisplayResolution


def build_production() -> AppServices:
    """Wire production adapters into an AppServices container."""
    return AppServices(
        get_config=get_config,
        display_config=display_config,
        init_logging=init_logging,
        load_schema=load_schema,
        display_resolution=display_resolution,
    )


def build_testing(*, schemas: SchemaStore | None = None, spy: ResolutionSpy | None = None) -> AppServices:
    """Wire in-memory adapters into an AppServices container.

    Args:
        schemas: Schema store to load from. When None, production schema
            loading from disk is used, so tests may still pass real files.
        spy: Resolution spy capturing displayed resolutions. When None, a
            fresh spy is created; pass your own to assert on what was shown.
    """
    from ..adapters.memory import (
        ResolutionSpy,
        display_config_in_memory,
        get_config_in_memory,
        init_logging_in_memory,
    )

    resolution_spy = spy if spy is not None else ResolutionSpy()
    return AppServices(
        get_config=get_config_in_memory,
        display_config=display_config_in_memory,
        init_logging=init_logging_in_memory,
        load_schema=schemas.load_schema if schemas is not None else load_schema,
        display_resolution=resolution_spy.display_resolution,
    )


__all__ = [
    # Configuration
    "display_config",
    "get_config",
    # Logging
    "init_logging",
    # Resolution
    "display_resolution",
    "load_schema",
    # Composition
    "AppServices",
    "build_production",
    "build_testing",
]
