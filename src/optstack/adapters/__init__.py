"""Adapters layer - infrastructure and framework integrations.

Contains adapter implementations that connect the resolution engine to the
filesystem and to the ``optstack`` command-line tool.

Contents:
    * :mod:`.optionfile` - Ini-style option files as option sources
    * :mod:`.schema` - TOML command-tree schemas
    * :mod:`.report` - Resolution reports in human/JSON formats
    * :mod:`.config` - The tool's own configuration loading and display
    * :mod:`.logging` - Logging setup with lib_log_rich
    * :mod:`.memory` - In-memory adapters for tests
    * :mod:`.cli` - Click CLI framework integration
"""

from __future__ import annotations

__all__: list[str] = []
