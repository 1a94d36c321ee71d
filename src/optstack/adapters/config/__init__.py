"""Configuration adapter - the tool's own layered settings.

Provides adapters for loading and showing the ``optstack`` tool's
configuration with lib_layered_config.

Contents:
    * :mod:`.loader` - Configuration loading with caching and profiles
    * :mod:`.display` - Configuration display in human/JSON formats
    * :mod:`.settings` - Typed ``[optstack]`` section
"""

from __future__ import annotations

from .display import display_config
from .loader import get_config, get_default_config_path
from .settings import ToolSettings, load_tool_settings

__all__ = [
    "ToolSettings",
    "display_config",
    "get_config",
    "get_default_config_path",
    "load_tool_settings",
]
