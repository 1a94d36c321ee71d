"""Option-file adapter - ini-style files as layered option sources.

Contents:
    * :mod:`.file` - :class:`OptionFile` parsing, section selection and rewriting
"""

from __future__ import annotations

from .file import OptionFile, Section

__all__ = [
    "OptionFile",
    "Section",
]
