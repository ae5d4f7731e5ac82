"""
Editor engine: the state machine, composer and highlighter wired together.

The host owns the selection and the settings and passes them in on every
call. The engine owns the editor state and keeps the highlighted rows in step
with whatever text is currently displayed.
"""
from __future__ import annotations

import logging
from typing import Callable, List, Mapping, Optional

from tweaksmith.composer.compose import ComposeResult, build_artifacts, compose
from tweaksmith.composer.powershell import DEFAULT_REBOOT_TIMEOUT
from tweaksmith.config.models import EditorSettings, Tweak
from tweaksmith.editor.highlighter import Highlighter
from tweaksmith.editor.line_numbers import (
    DEFAULT_ROW_HEIGHT,
    RowHeightProvider,
    VisualLayout,
    VisualLineMapper,
)
from tweaksmith.editor.state import (
    BufferEdited,
    Discard,
    EditorEvent,
    EditorMode,
    EditorState,
    EnterEdit,
    Save,
    SelectionChanged,
    SettingsChanged,
    transition,
)
from tweaksmith.editor.tokenizer import Token, split_lines

logger = logging.getLogger(__name__)

Composer = Callable[[Mapping[str, Tweak], EditorSettings], str]


class EditorEngine:
    """One script editor instance."""

    def __init__(
        self,
        selection: Mapping[str, Tweak],
        settings: EditorSettings,
        highlighter: Optional[Highlighter] = None,
        composer: Composer = compose,
        row_height: float = DEFAULT_ROW_HEIGHT,
    ):
        self._composer = composer
        self._selection = dict(selection)
        self._settings = settings
        self.highlighter = highlighter or Highlighter()
        self._mapper = VisualLineMapper(row_height)
        self._selection_pending = False
        self.state = EditorState.initial(self._compose())
        self.highlighter.submit(self.state.displayed_text)

    # -- read side ---------------------------------------------------------

    @property
    def mode(self) -> EditorMode:
        return self.state.mode

    @property
    def dirty(self) -> bool:
        return self.state.dirty

    @property
    def displayed_text(self) -> str:
        return self.state.displayed_text

    @property
    def saved_override(self) -> Optional[str]:
        return self.state.saved_override

    @property
    def selection(self) -> Mapping[str, Tweak]:
        return dict(self._selection)

    @property
    def settings(self) -> EditorSettings:
        return self._settings

    @property
    def rows(self) -> List[List[Token]]:
        """Token rows for the displayed text (possibly one pass behind)."""
        return self.highlighter.result.rows

    def visual_layout(
        self,
        provider: Optional[RowHeightProvider] = None,
        width: Optional[int] = None,
    ) -> Optional[VisualLayout]:
        """Gutter layout for the displayed text, or None when the gutter is off.

        Args:
            provider: Row height measurement; only consulted with word wrap on.
            width: Viewport width, part of the cache key so a resize remeasures.
        """
        if not self._settings.show_line_numbers:
            return None
        lines = split_lines(self.displayed_text)
        return self._mapper.layout(lines, self._settings.word_wrap, provider, width)

    def line_numbers(
        self,
        provider: Optional[RowHeightProvider] = None,
        width: Optional[int] = None,
    ) -> List[int]:
        layout = self.visual_layout(provider, width)
        return layout.line_numbers if layout is not None else []

    # -- host events -------------------------------------------------------

    def enter_edit(self) -> bool:
        """Switch to Edit. Returns False when editing is disabled."""
        if not self._settings.enable_code_editing:
            logger.debug("Code editing is disabled; staying in preview")
            return False
        self.dispatch(EnterEdit())
        return True

    def edit(self, text: str) -> None:
        self.dispatch(BufferEdited(text))

    def save(self) -> None:
        self.dispatch(Save())

    def discard(self) -> None:
        self.dispatch(Discard())

    def on_selection_changed(self, selection: Mapping[str, Tweak], settings: EditorSettings) -> None:
        """Track the host's selection.

        While editing, the buffer is left alone and the change is applied
        once Edit ends: a Discard shows (and exports) the new selection, a
        Save keeps the saved text as the override over it.
        """
        self._settings = settings
        self._selection = dict(selection)
        if self.state.is_editing:
            logger.debug("Selection change held until editing ends")
            self._selection_pending = True
            return
        self.dispatch(SelectionChanged(self._compose()))

    def on_settings_changed(self, settings: EditorSettings) -> None:
        self._settings = settings
        self.dispatch(SettingsChanged(self._compose(), settings.enable_code_editing))

    def dispatch(self, event: EditorEvent) -> EditorState:
        """Apply ``event`` and rehighlight if the displayed text changed."""
        before = self.state.displayed_text
        self.state = transition(self.state, event)
        if self._selection_pending and not self.state.is_editing:
            self._selection_pending = False
            if isinstance(event, Save):
                refresh: EditorEvent = SettingsChanged(self._compose(), self._settings.enable_code_editing)
            else:
                refresh = SelectionChanged(self._compose())
            self.state = transition(self.state, refresh)
        if self.state.displayed_text != before:
            self.highlighter.submit(self.state.displayed_text)
        return self.state

    def export(self, reboot_timeout: int = DEFAULT_REBOOT_TIMEOUT) -> ComposeResult:
        """Artifacts for the current selection, honouring a saved override."""
        return build_artifacts(
            self._selection,
            self._settings,
            override=self.state.saved_override,
            reboot_timeout=reboot_timeout,
        )

    def close(self) -> None:
        self.highlighter.close()

    def __enter__(self) -> "EditorEngine":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _compose(self) -> str:
        return self._composer(self._selection, self._settings)
