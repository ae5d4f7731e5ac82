"""
Pydantic models for Tweaksmith data and configuration.

These models define the schema for tweak catalogs (the YAML files a user
composes scripts from) and the editor settings bundle. They provide:
- Type-safe loading with automatic validation
- Human-readable error messages for invalid catalogs
- camelCase aliases so settings exported by the web editor load unchanged
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


# ============================================================================
# Tweaks
# ============================================================================


class Tweak(BaseModel):
    """A named remediation script snippet with usage metadata."""
    id: str = Field(min_length=1)
    title: str
    description: str = ""
    code: str = ""
    category_id: Optional[str] = None
    download_count: int = Field(default=0, ge=0)
    favorite_count: int = Field(default=0, ge=0)
    report_count: int = Field(default=0, ge=0)
    tweak_comment: str = ""

    model_config = {"frozen": True, "extra": "ignore"}

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Numeric ids from a database export become strings."""
        if isinstance(v, int) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("description", "code", "tweak_comment", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class TweakCatalog(BaseModel):
    """Root model for a tweak catalog file."""
    version: Optional[int] = None
    tweaks: List[Tweak] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_unique_ids(self) -> "TweakCatalog":
        ids = [t.id for t in self.tweaks]
        if len(ids) != len(set(ids)):
            dupes = sorted({i for i in ids if ids.count(i) > 1})
            raise ValueError(f"Duplicate tweak IDs: {dupes}")
        return self

    def by_id(self) -> Dict[str, Tweak]:
        """Index tweaks by id, keeping catalog order."""
        return {t.id: t for t in self.tweaks}


# ============================================================================
# Editor settings
# ============================================================================


class EditorSettings(BaseModel):
    """
    Settings bundle passed by value into every composer and editor call.

    Field names are snake_case; the camelCase names used by the web editor
    (``hideSensitive``, ``wordWrap``, ...) are accepted as aliases.
    """
    hide_sensitive: bool = False
    show_comments: bool = False
    download_each_tweak: bool = False
    auto_create_restore_point: bool = True
    always_show_warning: bool = True
    word_wrap: bool = False
    show_line_numbers: bool = True
    enable_text_colors: bool = True
    encoding_utf8: bool = True
    enable_code_editing: bool = False

    model_config = {
        "frozen": True,
        "extra": "ignore",
        "populate_by_name": True,
        "alias_generator": to_camel,
    }

    @model_validator(mode="before")
    @classmethod
    def force_line_numbers_when_editing(cls, data: Any) -> Any:
        """Code editing relies on the gutter, so line numbers stay on with it."""
        if not isinstance(data, dict):
            return data
        editing = data.get("enable_code_editing", data.get("enableCodeEditing", False))
        if editing is True:
            data = {
                k: v for k, v in data.items()
                if k not in ("show_line_numbers", "showLineNumbers")
            }
            data["show_line_numbers"] = True
        return data

    def updated(self, **changes: Any) -> "EditorSettings":
        """Return a validated copy with ``changes`` applied."""
        return type(self).model_validate({**self.model_dump(), **changes})
