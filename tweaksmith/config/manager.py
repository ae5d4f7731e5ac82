"""
Tweaksmith configuration manager.

Settings hierarchy:
    builtin defaults                      EditorSettings() field defaults
    ~/.tweaksmith/settings.yaml           User overrides (partial is fine)

Unreadable or invalid settings files never stop the editor: they are logged
and the defaults are used instead. Tweak catalogs, on the other hand, are
the user's explicit input, so problems there raise ``CatalogError``.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

import yaml
from pydantic import ValidationError

from tweaksmith.config.models import EditorSettings, Tweak, TweakCatalog
from tweaksmith.exceptions import CatalogError, SettingsError, UnknownTweakError

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path.home() / ".tweaksmith" / "settings.yaml"

Selection = Dict[str, Tweak]


class SettingsManager:
    """Load and persist the editor settings bundle as YAML."""

    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else DEFAULT_SETTINGS_PATH

    def load(self) -> EditorSettings:
        """Load settings merged over the defaults."""
        if not self.path.is_file():
            return EditorSettings()

        try:
            with open(self.path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as exc:
            logger.warning("Could not read settings at %s: %s", self.path, exc)
            return EditorSettings()

        if not isinstance(data, dict):
            logger.warning("Settings at %s is not a mapping; using defaults", self.path)
            return EditorSettings()

        try:
            return EditorSettings.model_validate(data)
        except ValidationError as exc:
            logger.warning("Invalid settings at %s; using defaults: %s", self.path, exc)
            return EditorSettings()

    def save(self, settings: EditorSettings) -> None:
        """Write the full settings bundle."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            yaml.safe_dump(settings.model_dump(), f, default_flow_style=False, sort_keys=True)

    def set_value(self, key: str, value: Union[str, bool]) -> EditorSettings:
        """Update a single flag and persist the result.

        Args:
            key: Field name (snake_case) or its camelCase alias.
            value: A bool, or a string such as "true"/"off"/"1".

        Raises:
            SettingsError: Unknown key or unparseable value.
        """
        field = _resolve_field(key)
        flag = value if isinstance(value, bool) else parse_bool(value)
        settings = self.load().updated(**{field: flag})
        self.save(settings)
        return settings


_TRUE_VALUES = {"1", "true", "yes", "on", "y"}
_FALSE_VALUES = {"0", "false", "no", "off", "n"}


def parse_bool(value: str) -> bool:
    """Parse a human-entered boolean."""
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    raise SettingsError(f"Not a boolean value: {value!r}")


def _resolve_field(key: str) -> str:
    fields = EditorSettings.model_fields
    if key in fields:
        return key
    for name, info in fields.items():
        if info.alias == key:
            return name
    raise SettingsError(f"Unknown setting: {key}")


# ============================================================================
# Tweak catalogs
# ============================================================================


def load_catalog(path: Path) -> TweakCatalog:
    """Load a YAML tweak catalog.

    The file may be a mapping with a ``tweaks`` list or a bare list of tweaks.

    Raises:
        CatalogError: The file is missing, not YAML, or fails validation.
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as exc:
        raise CatalogError(f"Could not read catalog: {exc}", path=str(path)) from exc
    except yaml.YAMLError as exc:
        raise CatalogError(f"Catalog is not valid YAML: {exc}", path=str(path)) from exc

    return parse_catalog(data, source=str(path))


def parse_catalog(data: Any, source: str = "") -> TweakCatalog:
    """Validate already-parsed catalog data."""
    if data is None:
        data = {}
    if isinstance(data, list):
        data = {"tweaks": data}
    if not isinstance(data, dict):
        raise CatalogError("Catalog must be a mapping or a list of tweaks", path=source)

    try:
        catalog = TweakCatalog.model_validate(data)
    except ValidationError as exc:
        raise CatalogError(f"Invalid catalog: {exc}", path=source) from exc

    logger.debug("Loaded %d tweak(s) from %s", len(catalog.tweaks), source or "<data>")
    return catalog


def build_selection(
    tweaks: Union[TweakCatalog, Iterable[Tweak]],
    ids: Optional[Iterable[str]] = None,
) -> Selection:
    """Build an ordered selection.

    Args:
        tweaks: Catalog (or iterable of tweaks) to select from.
        ids: Tweak ids in the order the user picked them. ``None`` selects
            every tweak in catalog order. Repeated ids keep their first position.

    Raises:
        UnknownTweakError: An id is not in the catalog.
    """
    pool = tweaks.tweaks if isinstance(tweaks, TweakCatalog) else list(tweaks)
    index = {t.id: t for t in pool}
    if ids is None:
        return dict(index)

    selection: Selection = {}
    for tweak_id in ids:
        if tweak_id not in index:
            raise UnknownTweakError(tweak_id)
        selection.setdefault(tweak_id, index[tweak_id])
    return selection
