"""Schema adapter - command trees declared in TOML.

Contents:
    * :mod:`.models` - Pydantic schema models
    * :mod:`.loader` - rtoml loading and tree building
"""

from __future__ import annotations

from .loader import SchemaError, build_command_tree, load_schema
from .models import ArgSchema, CommandSchema, OptionSchema, SchemaDocument

__all__ = [
    "ArgSchema",
    "CommandSchema",
    "OptionSchema",
    "SchemaDocument",
    "SchemaError",
    "build_command_tree",
    "load_schema",
]
