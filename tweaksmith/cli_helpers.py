#!/usr/bin/env python3
"""
Tweaksmith CLI Helpers

Shared formatting utilities for consistent CLI output: status messages,
logging setup, the export warning, and the highlighted script view with its
line-number gutter.
"""

import logging
from typing import List, Optional, Sequence

from rich.cells import cell_len
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from tweaksmith.editor.line_numbers import VisualLayout
from tweaksmith.editor.tokenizer import Token, token_style

# Single shared Console instance for the entire CLI
console = Console()

TAB_SIZE = 4

EXPORT_WARNING = """\
[bold yellow]Experimental tweaks: use at your own risk.[/bold yellow]

Before running the exported script, make sure you:
  • have reviewed and understand each tweak in it
  • have a system restore point (the script offers to create one)
  • are aware some tweaks need administrator privileges
  • have backed up important data

[red]Some tweaks may not be compatible with each other or with your system.[/red]"""


def print_success(message: str) -> None:
    """Print a success message with green checkmark."""
    console.print(f"[green]✓[/green] {escape(message)}")


def print_warning(message: str) -> None:
    """Print a warning message with yellow triangle."""
    console.print(f"[yellow]⚠[/yellow]  {escape(message)}")


def print_error(message: str, fix_hint: str = "") -> None:
    """Print an error message with red X and optional fix hint."""
    console.print(f"[red]✗[/red] {escape(message)}")
    if fix_hint:
        console.print(f"  [white]Hint: {escape(fix_hint)}[/white]")


def print_export_warning() -> None:
    console.print(Panel(
        EXPORT_WARNING,
        title="Read before exporting",
        border_style="yellow",
        padding=(0, 2),
    ))


def configure_logging(verbose: bool = False) -> None:
    """Route package logging through rich. WARNING by default, DEBUG with verbose."""
    level = logging.DEBUG if verbose else logging.WARNING
    logger = logging.getLogger("tweaksmith")
    logger.setLevel(level)
    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        logger.addHandler(RichHandler(console=console, show_path=verbose, markup=False))


def token_text(tokens: Sequence[Token], colors: bool = True) -> Text:
    """
    Paint one token row.

    Args:
        tokens: Tokens of a single logical line.
        colors: When False every span uses the default foreground.

    Returns:
        Rich Text whose plain content is the original line.
    """
    text = Text()
    for token in tokens:
        text.append(token.value, style=token_style(token.type) if colors else "")
    return text


def fold_text(text: Text, columns: int) -> Text:
    """Break ``text`` into rows of at most ``columns`` cells, keeping styles."""
    offsets = []
    width = 0
    for index, char in enumerate(text.plain):
        char_width = cell_len(char)
        if width and width + char_width > columns:
            offsets.append(index)
            width = 0
        width += char_width
    if not offsets:
        return text
    return Text("\n").join(text.divide(offsets))


def gutter_width(layout: Optional[VisualLayout]) -> int:
    """Columns needed for the largest line number (0 without a gutter)."""
    if layout is None or not layout.line_numbers:
        return 0
    return len(str(layout.line_numbers[-1]))


def build_script_view(
    rows: List[List[Token]],
    layout: Optional[VisualLayout],
    columns: Optional[int] = None,
    colors: bool = True,
) -> Table:
    """
    Build a two-column grid: visual line numbers and highlighted code.

    Each logical line occupies one grid row. Its gutter cell stacks one
    number per visual row; the code is folded here (not by rich) so that the
    row count always matches what the layout measured.

    Args:
        rows: Token rows from the highlighter.
        layout: Gutter layout, or None to hide line numbers.
        columns: Fold code at this many cells (word wrap). None crops instead.
        colors: Apply token styles.
    """
    table = Table.grid(padding=(0, 1, 0, 0))
    if layout is not None:
        table.add_column(justify="right", style="dim", no_wrap=True)
    table.add_column(no_wrap=True, overflow="crop")

    start = 0
    for index, tokens in enumerate(rows):
        code = token_text(tokens, colors)
        code.expand_tabs(TAB_SIZE)
        if columns is not None:
            code = fold_text(code, columns)

        if layout is None:
            table.add_row(code)
            continue
        count = layout.rows_per_line[index] if index < len(layout.rows_per_line) else 1
        numbers = layout.line_numbers[start:start + count]
        start += count
        table.add_row("\n".join(str(n) for n in numbers), code)
    return table
