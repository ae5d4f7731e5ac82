"""
Tests for tweaksmith.editor.line_numbers.

Row heights come from fake providers so the accumulation is tested without
any real layout engine.
"""

import pytest

from tweaksmith.editor.line_numbers import (
    DEFAULT_ROW_HEIGHT,
    MonospaceRowHeightProvider,
    VisualLineMapper,
    compute_visual_layout,
    compute_visual_line_numbers,
    rows_for_height,
)

pytestmark = pytest.mark.editor


class CountingProvider:
    """Returns fixed heights per line index and counts calls."""

    def __init__(self, heights):
        self.heights = heights
        self.calls = 0

    def __call__(self, index, line):
        self.calls += 1
        return self.heights[index]


class TestRowsForHeight:

    @pytest.mark.parametrize("height, rows", [
        (20, 1), (21, 2), (40, 2), (59.5, 3), (1, 1), (0, 1), (None, 1), (-10, 1),
    ])
    def test_rounding(self, height, rows):
        assert rows_for_height(height, 20) == rows

    @pytest.mark.parametrize("height", [float("nan"), float("inf"), float("-inf")])
    def test_non_finite_height_is_one_row(self, height):
        assert rows_for_height(height, 20) == 1


class TestComputeVisualLayout:

    def test_no_wrap_is_logical_numbering(self):
        provider = CountingProvider([500.0] * 10)
        numbers = compute_visual_line_numbers([f"line {i}" for i in range(10)], False, provider)
        assert numbers == list(range(1, 11))
        assert provider.calls == 0

    def test_wrapped_lines_take_several_numbers(self):
        layout = compute_visual_layout(["a", "b", "c"], True, CountingProvider([20, 60, 20]))
        assert layout.rows_per_line == [1, 3, 1]
        assert layout.line_numbers == [1, 2, 3, 4, 5]
        assert layout.total_rows == 5

    def test_unmeasured_line_counts_as_one_row(self):
        layout = compute_visual_layout(["a", "b"], True, CountingProvider([None, 41]))
        assert layout.rows_per_line == [1, 3]

    def test_provider_error_counts_as_one_row(self):
        def flaky(index, line):
            if index == 0:
                raise RuntimeError("not laid out yet")
            return 40

        assert compute_visual_layout(["a", "b"], True, flaky).rows_per_line == [1, 2]

    def test_wrap_without_provider(self):
        assert compute_visual_line_numbers(["a", "b"], True) == [1, 2]

    def test_first_row(self):
        layout = compute_visual_layout(["a", "b", "c"], True, CountingProvider([40, 20, 60]))
        assert [layout.first_row(i) for i in range(3)] == [1, 3, 4]

    def test_custom_row_height(self):
        layout = compute_visual_layout(["a"], True, CountingProvider([30]), row_height=10)
        assert layout.rows_per_line == [3]

    def test_row_height_must_be_positive(self):
        with pytest.raises(ValueError):
            compute_visual_layout(["a"], True, row_height=0)

    def test_empty(self):
        assert compute_visual_line_numbers([], True) == []


class TestMonospaceProvider:

    def test_rows_from_columns(self):
        provider = MonospaceRowHeightProvider(columns=10)
        assert provider(0, "") == DEFAULT_ROW_HEIGHT
        assert provider(0, "x" * 10) == DEFAULT_ROW_HEIGHT
        assert provider(0, "x" * 11) == 2 * DEFAULT_ROW_HEIGHT

    def test_tabs_expand(self):
        provider = MonospaceRowHeightProvider(columns=4, row_height=1)
        assert provider(0, "\tx") == 2

    def test_wide_characters(self):
        provider = MonospaceRowHeightProvider(columns=4, row_height=1)
        assert provider(0, "日本語") == 2

    def test_columns_validated(self):
        with pytest.raises(ValueError):
            MonospaceRowHeightProvider(columns=0)

    def test_layout_with_monospace(self):
        lines = ["short", "x" * 25]
        layout = compute_visual_layout(lines, True, MonospaceRowHeightProvider(columns=10))
        assert layout.line_numbers == [1, 2, 3, 4]


class TestVisualLineMapper:

    def test_cached_until_inputs_change(self):
        mapper = VisualLineMapper()
        provider = CountingProvider([40, 20])
        first = mapper.layout(["a", "b"], True, provider, width=80)
        second = mapper.layout(["a", "b"], True, provider, width=80)
        assert first is second
        assert provider.calls == 2

    def test_width_change_remeasures(self):
        mapper = VisualLineMapper()
        provider = CountingProvider([40, 20])
        mapper.layout(["a", "b"], True, provider, width=80)
        mapper.layout(["a", "b"], True, provider, width=40)
        assert provider.calls == 4

    def test_content_change_remeasures(self):
        mapper = VisualLineMapper()
        provider = CountingProvider([20, 20])
        mapper.layout(["a", "b"], True, provider)
        assert mapper.layout(["a", "c"], True, provider).line_numbers == [1, 2]
        assert provider.calls == 4

    def test_wrap_toggle(self):
        mapper = VisualLineMapper()
        provider = CountingProvider([60])
        assert mapper.layout(["a"], True, provider).line_numbers == [1, 2, 3]
        assert mapper.layout(["a"], False, provider).line_numbers == [1]

    def test_invalidate(self):
        mapper = VisualLineMapper()
        provider = CountingProvider([20])
        mapper.layout(["a"], True, provider)
        mapper.invalidate()
        mapper.layout(["a"], True, provider)
        assert provider.calls == 2

    def test_provider_change_remeasures(self):
        mapper = VisualLineMapper()
        tall = CountingProvider([40, 40])
        short = CountingProvider([20, 20])
        assert mapper.layout(["a", "b"], True, tall, width=80).line_numbers == [1, 2, 3, 4]
        assert mapper.layout(["a", "b"], True, short, width=80).line_numbers == [1, 2]
        assert short.calls == 2

    def test_equal_monospace_providers_share_cache(self):
        mapper = VisualLineMapper()
        first = mapper.layout(["a" * 25], True, MonospaceRowHeightProvider(columns=10), width=10)
        second = mapper.layout(["a" * 25], True, MonospaceRowHeightProvider(columns=10), width=10)
        assert first is second
        narrower = mapper.layout(["a" * 25], True, MonospaceRowHeightProvider(columns=5), width=10)
        assert narrower.line_numbers == [1, 2, 3, 4, 5]

    def test_row_height_change_remeasures(self):
        mapper = VisualLineMapper()
        provider = CountingProvider([40])
        assert mapper.layout(["a"], True, provider).line_numbers == [1, 2]
        mapper.row_height = 40.0
        assert mapper.layout(["a"], True, provider).line_numbers == [1]
