"""POSIX-conventional exit codes for CLI error paths.

Signal codes (130, 141, 143) are informational only; ``lib_cli_exit_tools``
translates signals itself.

Contents:
    * :class:`ExitCode` - IntEnum of all exit codes used by this application.
"""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Exit codes following errno and sysexits.h conventions.

    * 2: ENOENT - a schema or option file is missing
    * 17: EEXIST - refusing to overwrite an output file
    * 22: EINVAL - invalid command line for the resolved program
    * 78: EX_CONFIG - invalid schema or option file
    * 128+N: signal N (informational only)

    Example:
        >>> int(ExitCode.CONFIG_ERROR)
        78
        >>> ExitCode(22).name
        'INVALID_ARGUMENT'
    """

    SUCCESS = 0
    GENERAL_ERROR = 1
    FILE_NOT_FOUND = 2
    FILE_EXISTS = 17
    INVALID_ARGUMENT = 22
    CONFIG_ERROR = 78
    SIGNAL_INT = 130
    BROKEN_PIPE = 141
    SIGNAL_TERM = 143


__all__ = ["ExitCode"]
