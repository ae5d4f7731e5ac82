"""Tweaksmith script composer."""

from tweaksmith.composer.compose import (
    COMBINED_SCRIPT_NAME,
    CUSTOM_SCRIPT_NAME,
    EMPTY_SELECTION_PLACEHOLDER,
    ComposeResult,
    ComposeWarning,
    ScriptArtifact,
    TweakProcessingWarning,
    build_artifacts,
    compose,
)

__all__ = [
    "COMBINED_SCRIPT_NAME", "CUSTOM_SCRIPT_NAME", "EMPTY_SELECTION_PLACEHOLDER",
    "ComposeResult", "ComposeWarning", "ScriptArtifact", "TweakProcessingWarning",
    "build_artifacts", "compose",
]
