"""
Editor state machine.

States: PREVIEW (initial) and EDIT. The state carries three text slots:

    baseline        snapshot taken when Edit began
    live_buffer     current edits
    saved_override  last explicitly saved text, or None

plus ``composed``, the composer output for the current selection.

``transition`` is pure: it returns the next state and never mutates its input.
Selection changes are ignored while editing so in-progress edits survive.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Union


class EditorMode(str, Enum):
    """Presentation modes."""
    PREVIEW = "preview"
    EDIT = "edit"


@dataclass(frozen=True)
class EditorState:
    """Snapshot of one editor instance."""
    mode: EditorMode = EditorMode.PREVIEW
    composed: str = ""
    baseline: str = ""
    live_buffer: str = ""
    saved_override: Optional[str] = None

    @classmethod
    def initial(cls, composed: str) -> "EditorState":
        return cls(composed=composed, baseline=composed, live_buffer=composed)

    @property
    def dirty(self) -> bool:
        return self.live_buffer != self.baseline

    @property
    def is_editing(self) -> bool:
        return self.mode is EditorMode.EDIT

    @property
    def preview_text(self) -> str:
        """What Preview shows: the saved override, else the composed text."""
        return self.saved_override if self.saved_override is not None else self.composed

    @property
    def displayed_text(self) -> str:
        return self.live_buffer if self.is_editing else self.preview_text


# ============================================================================
# Events
# ============================================================================


@dataclass(frozen=True)
class EnterEdit:
    """Preview -> Edit."""


@dataclass(frozen=True)
class BufferEdited:
    """A keystroke (or paste) replaced the live buffer with ``text``."""
    text: str


@dataclass(frozen=True)
class Save:
    """Edit -> Preview, keeping the edits as the override."""


@dataclass(frozen=True)
class Discard:
    """Edit -> Preview, dropping the edits."""


@dataclass(frozen=True)
class SelectionChanged:
    """The selection changed; ``composed`` is the composer output for it."""
    composed: str


@dataclass(frozen=True)
class SettingsChanged:
    """Settings changed without touching the selection."""
    composed: str
    editing_enabled: bool = True


EditorEvent = Union[EnterEdit, BufferEdited, Save, Discard, SelectionChanged, SettingsChanged]


def transition(state: EditorState, event: EditorEvent) -> EditorState:
    """Return the state that follows ``state`` after ``event``."""
    if isinstance(event, EnterEdit):
        if state.is_editing:
            return state
        text = state.preview_text
        return replace(state, mode=EditorMode.EDIT, baseline=text, live_buffer=text)

    if isinstance(event, BufferEdited):
        if not state.is_editing:
            return state
        return replace(state, live_buffer=event.text)

    if isinstance(event, Save):
        if not state.is_editing:
            return state
        return replace(
            state,
            mode=EditorMode.PREVIEW,
            saved_override=state.live_buffer,
            baseline=state.live_buffer,
        )

    if isinstance(event, Discard):
        if not state.is_editing:
            return state
        return replace(state, mode=EditorMode.PREVIEW, live_buffer=state.baseline)

    if isinstance(event, SelectionChanged):
        # In-progress edits win over selection changes
        if state.is_editing:
            return state
        return EditorState.initial(event.composed)

    if isinstance(event, SettingsChanged):
        next_state = replace(state, composed=event.composed)
        if next_state.is_editing and not event.editing_enabled:
            return transition(next_state, Discard())
        return next_state

    raise TypeError(f"Unknown editor event: {event!r}")
