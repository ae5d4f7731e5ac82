"""
Tweaksmith script editor: tokenizer, highlighter, line numbering and state.
"""

from tweaksmith.editor.engine import EditorEngine
from tweaksmith.editor.highlighter import INLINE_LINE_LIMIT, Highlighter
from tweaksmith.editor.line_numbers import (
    DEFAULT_ROW_HEIGHT,
    MonospaceRowHeightProvider,
    VisualLayout,
    VisualLineMapper,
    compute_visual_layout,
    compute_visual_line_numbers,
)
from tweaksmith.editor.state import (
    BufferEdited,
    Discard,
    EditorMode,
    EditorState,
    EnterEdit,
    Save,
    SelectionChanged,
    SettingsChanged,
    transition,
)
from tweaksmith.editor.tokenizer import (
    HighlightResult,
    Token,
    TokenType,
    highlight_code,
    split_lines,
    tokenize,
)

__all__ = [
    "EditorEngine",
    "Highlighter",
    "INLINE_LINE_LIMIT",
    "DEFAULT_ROW_HEIGHT",
    "MonospaceRowHeightProvider",
    "VisualLayout",
    "VisualLineMapper",
    "compute_visual_layout",
    "compute_visual_line_numbers",
    "BufferEdited",
    "Discard",
    "EditorMode",
    "EditorState",
    "EnterEdit",
    "Save",
    "SelectionChanged",
    "SettingsChanged",
    "transition",
    "HighlightResult",
    "Token",
    "TokenType",
    "highlight_code",
    "split_lines",
    "tokenize",
]
