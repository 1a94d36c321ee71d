"""In-memory schema loading for testing.

Contents:
    * :class:`SchemaStore` - Serves schema mappings keyed by path.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ...domain.command import Command
from ..schema.loader import build_command_tree


def _empty_schemas() -> dict[str, Mapping[str, Any]]:
    return {}


@dataclass
class SchemaStore:
    """Schema documents held in memory, as parsed TOML would produce them.

    Built trees are kept alive by the store, so sub-commands never lose
    their parents during a test.

    Example:
        >>> store = SchemaStore({"tool.toml": {"command": {"name": "tool"}}})
        >>> store.load_schema(Path("tool.toml")).name
        'tool'
    """

    schemas: dict[str, Mapping[str, Any]] = field(default_factory=_empty_schemas)
    built: list[Command] = field(default_factory=list)

    def load_schema(self, path: Path) -> Command:
        """Build the schema stored under ``str(path)``.

        Raises:
            FileNotFoundError: No schema is stored under that path.
            SchemaError: The stored mapping is not a valid schema.
        """
        data = self.schemas.get(str(path))
        if data is None:
            raise FileNotFoundError(2, "No such schema", str(path))
        root = build_command_tree(data, str(path))
        self.built.append(root)
        return root


__all__ = ["SchemaStore"]
