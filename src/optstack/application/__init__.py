"""Application layer - use cases and port definitions.

Contents:
    * :mod:`.ports` - Callable Protocol definitions for adapter functions
    * :mod:`.dispatch` - Run the handler chosen by a parsed command line
    * :mod:`.resolution` - Snapshot resolved values with provenance
"""

from __future__ import annotations

from .dispatch import handle_command, help_handler, render_usage, requests_builtin, version_handler
from .ports import DisplayConfig, DisplayResolution, GetConfig, InitLogging, LoadSchema
from .resolution import Resolution, ResolvedValue, resolve_all

__all__ = [
    "DisplayConfig",
    "DisplayResolution",
    "GetConfig",
    "InitLogging",
    "LoadSchema",
    "Resolution",
    "ResolvedValue",
    "handle_command",
    "help_handler",
    "render_usage",
    "requests_builtin",
    "resolve_all",
    "version_handler",
]
