"""
Visual line numbering.

With word wrap off, the gutter shows logical numbers 1..n. With wrap on, every
visual row gets its own number, so a logical line wrapped over three rows
takes numbers k, k+1, k+2 and the next logical line starts at k+3.

Row counts come from a measured height per logical line:

    rows = max(1, ceil(height / row_height))

A line that cannot be measured (provider returns None, raises, or reports a
height that is not finite) counts as one row.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple

from rich.cells import cell_len

logger = logging.getLogger(__name__)

DEFAULT_ROW_HEIGHT = 20.0

# (logical line index, line text) -> measured height, or None if unknown
RowHeightProvider = Callable[[int, str], Optional[float]]


@dataclass(frozen=True)
class VisualLayout:
    """Gutter numbers plus the row count of each logical line."""
    line_numbers: List[int]
    rows_per_line: List[int]

    @property
    def total_rows(self) -> int:
        return len(self.line_numbers)

    def first_row(self, line_index: int) -> int:
        """1-based visual row where logical line ``line_index`` starts."""
        return sum(self.rows_per_line[:line_index]) + 1


def rows_for_height(height: Optional[float], row_height: float = DEFAULT_ROW_HEIGHT) -> int:
    if height is None or not math.isfinite(height) or height <= 0:
        return 1
    return max(1, math.ceil(height / row_height))


def compute_visual_layout(
    lines: Sequence[str],
    word_wrap: bool,
    provider: Optional[RowHeightProvider] = None,
    row_height: float = DEFAULT_ROW_HEIGHT,
) -> VisualLayout:
    """Number every visual row of ``lines``.

    Args:
        lines: Logical lines of the displayed buffer.
        word_wrap: When False, nothing is measured and numbering is 1..n.
        provider: Height measurement per logical line. Without one every
            line counts as a single row.
        row_height: Height of one visual row, in the provider's units.
    """
    if row_height <= 0:
        raise ValueError("row_height must be positive")

    if not word_wrap or provider is None:
        rows = [1] * len(lines)
    else:
        rows = []
        for index, line in enumerate(lines):
            try:
                height = provider(index, line)
            except Exception as exc:
                logger.debug("Row height unavailable for line %d: %s", index + 1, exc)
                height = None
            rows.append(rows_for_height(height, row_height))

    total = sum(rows)
    return VisualLayout(line_numbers=list(range(1, total + 1)), rows_per_line=rows)


def compute_visual_line_numbers(
    lines: Sequence[str],
    word_wrap: bool,
    provider: Optional[RowHeightProvider] = None,
    row_height: float = DEFAULT_ROW_HEIGHT,
) -> List[int]:
    """Shortcut returning only the gutter numbers."""
    return compute_visual_layout(lines, word_wrap, provider, row_height).line_numbers


class MonospaceRowHeightProvider:
    """Measures lines as if rendered in a fixed-width viewport.

    Widths are terminal cells, so wide characters count double.
    """

    def __init__(self, columns: int, row_height: float = DEFAULT_ROW_HEIGHT, tab_size: int = 4):
        if columns < 1:
            raise ValueError("columns must be at least 1")
        self.columns = columns
        self.row_height = row_height
        self.tab_size = tab_size

    def __call__(self, index: int, line: str) -> Optional[float]:
        width = cell_len(line.expandtabs(self.tab_size))
        rows = max(1, math.ceil(width / self.columns))
        return rows * self.row_height

    def _params(self) -> Tuple[int, float, int]:
        return (self.columns, self.row_height, self.tab_size)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MonospaceRowHeightProvider):
            return NotImplemented
        return self._params() == other._params()

    def __hash__(self) -> int:
        return hash(self._params())


class VisualLineMapper:
    """
    Caches the last layout.

    The layout is recomputed only when the content, the viewport width, the
    wrap flag, the provider or the row height changes, or after ``invalidate``
    (e.g. a font change that alters measured heights). Providers are compared
    with ``==``, so plain callables match only themselves.
    """

    def __init__(self, row_height: float = DEFAULT_ROW_HEIGHT):
        self.row_height = row_height
        self._key: Optional[Tuple[Any, ...]] = None
        self._layout: Optional[VisualLayout] = None

    def layout(
        self,
        lines: Sequence[str],
        word_wrap: bool,
        provider: Optional[RowHeightProvider] = None,
        width: Optional[int] = None,
    ) -> VisualLayout:
        # The key holds the provider itself, so its identity cannot be reused
        key = (tuple(lines), width, word_wrap, provider, self.row_height)
        if self._layout is not None and key == self._key:
            return self._layout

        self._layout = compute_visual_layout(lines, word_wrap, provider, self.row_height)
        self._key = key
        return self._layout

    def invalidate(self) -> None:
        self._key = None
        self._layout = None
