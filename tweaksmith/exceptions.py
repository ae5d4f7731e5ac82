"""Tweaksmith exception hierarchy."""


class TweaksmithError(Exception):
    """Base class for errors raised by Tweaksmith."""


class CatalogError(TweaksmithError):
    """Raised when a tweak catalog cannot be read or validated."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class UnknownTweakError(TweaksmithError):
    """Raised when a selection references a tweak id missing from the catalog."""

    def __init__(self, tweak_id: str):
        super().__init__(f"Unknown tweak id: {tweak_id}")
        self.tweak_id = tweak_id


class SettingsError(TweaksmithError):
    """Raised when a settings value cannot be applied."""
