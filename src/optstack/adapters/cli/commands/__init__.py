"""CLI command implementations.

Collects all subcommand functions and re-exports them for registration
with the root CLI group.

Contents:
    * Info command from :mod:`.info`
    * Config command from :mod:`.config`
    * Resolution command from :mod:`.resolve`
    * Option file commands from :mod:`.check` and :mod:`.normalize`
"""

from __future__ import annotations

from .check import cli_check
from .config import cli_config
from .info import cli_info
from .normalize import cli_normalize
from .resolve import cli_resolve

__all__ = [
    "cli_check",
    "cli_config",
    "cli_info",
    "cli_normalize",
    "cli_resolve",
]
