"""Report adapter - resolution snapshots as tables or JSON.

Contents:
    * :mod:`.display` - rich and orjson rendering
"""

from __future__ import annotations

from .display import build_table, display_resolution, render_json

__all__ = [
    "build_table",
    "display_resolution",
    "render_json",
]
