"""Typed view of the ``[optstack]`` section of the tool's configuration."""

from __future__ import annotations

from typing import cast

from lib_layered_config import Config
from pydantic import BaseModel, ConfigDict, field_validator

from optstack.domain.enums import OutputFormat


class ToolSettings(BaseModel):
    """Defaults for the ``optstack`` commands.

    Example:
        >>> ToolSettings().output_format
        <OutputFormat.HUMAN: 'human'>
        >>> ToolSettings(output_format="JSON").output_format
        <OutputFormat.JSON: 'json'>
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    output_format: OutputFormat = OutputFormat.HUMAN
    loose_file_options: bool = False

    @field_validator("output_format", mode="before")
    @classmethod
    def _lowercase_format(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v


def load_tool_settings(config: Config) -> ToolSettings:
    """Validate the ``[optstack]`` section, falling back to defaults when absent.

    Raises:
        pydantic.ValidationError: The section holds invalid values.

    Example:
        >>> load_tool_settings(Config({"optstack": {"loose_file_options": True}}, {})).loose_file_options
        True
    """
    raw: object = config.get("optstack", default={})
    return ToolSettings.model_validate(cast("dict[str, object]", raw) if raw else {})


__all__ = [
    "ToolSettings",
    "load_tool_settings",
]
