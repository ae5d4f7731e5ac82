"""Tweaksmith configuration module."""

from .manager import (
    DEFAULT_SETTINGS_PATH,
    Selection,
    SettingsManager,
    build_selection,
    load_catalog,
    parse_catalog,
)
from .models import EditorSettings, Tweak, TweakCatalog

__all__ = [
    "DEFAULT_SETTINGS_PATH", "Selection", "SettingsManager",
    "build_selection", "load_catalog", "parse_catalog",
    "EditorSettings", "Tweak", "TweakCatalog",
]
