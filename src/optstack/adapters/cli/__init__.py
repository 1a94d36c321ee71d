"""CLI adapter - rich-click front end of the ``optstack`` tool.

Contents:
    * :mod:`.root` - Root command group and global options
    * :mod:`.main` - Entry point with traceback and logging lifecycle
    * :mod:`.commands` - Subcommands (info, config, resolve, check, normalize)
    * :mod:`.context` - Typed Click context
    * :mod:`.exit_codes` - Exit code enum
"""

from __future__ import annotations

from .exit_codes import ExitCode
from .main import main
from .root import cli

__all__ = [
    "ExitCode",
    "cli",
    "main",
]
