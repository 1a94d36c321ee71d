"""Application ports - callable Protocol definitions for adapter functions.

Each Protocol declares a ``__call__`` signature matching one adapter
function, so module-level functions satisfy the ports structurally.

System Role:
    Sits between domain and adapters. Infrastructure types (the tool's own
    layered ``Config``) are imported under ``TYPE_CHECKING`` only so the
    layering stays intact at runtime.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from ..domain.command import Command
from ..domain.enums import OutputFormat
from .resolution import Resolution

if TYPE_CHECKING:
    from lib_layered_config import Config


class GetConfig(Protocol):
    """Load the tool's own layered configuration."""

    def __call__(self, *, profile: str | None = ..., start_dir: str | None = ...) -> Config: ...


class DisplayConfig(Protocol):
    """Display the tool's configuration in the requested format."""

    def __call__(
        self, config: Config, *, output_format: OutputFormat = ..., section: str | None = ..., profile: str | None = ...
    ) -> None: ...


class InitLogging(Protocol):
    """Initialize the lib_log_rich runtime from the tool's configuration."""

    def __call__(self, config: Config) -> None: ...


class LoadSchema(Protocol):
    """Build a command tree from a schema file."""

    def __call__(self, path: Path) -> Command: ...


class DisplayResolution(Protocol):
    """Render a resolution snapshot."""

    def __call__(self, resolution: Resolution, *, output_format: OutputFormat = ...) -> None: ...


__all__ = [
    "DisplayConfig",
    "DisplayResolution",
    "GetConfig",
    "InitLogging",
    "LoadSchema",
]
