"""
Cleanup and combination of tweak code blocks.

All transforms here are idempotent: cleaning already-clean code is a no-op.
"""
from __future__ import annotations

import re
from typing import Iterable

_LINE_ENDINGS = re.compile(r"\r\n|\r")
_TRAILING_WHITESPACE = re.compile(r"[^\S\n]+$", re.MULTILINE)
_BLANK_RUN = re.compile(r"\n{3,}")

BLOCK_SEPARATOR = "\n\n"


def clean_tweak_code(raw: str) -> str:
    """Normalize a raw code block.

    - line endings become ``\\n``
    - trailing whitespace is stripped from every line
    - runs of blank lines collapse to a single blank line
    - leading and trailing blank lines are removed (first-line indent is kept)
    """
    if not raw:
        return ""
    text = _LINE_ENDINGS.sub("\n", raw)
    text = _TRAILING_WHITESPACE.sub("", text)
    text = _BLANK_RUN.sub("\n\n", text)
    return text.strip("\n")


def combine_blocks(blocks: Iterable[str]) -> str:
    """Join non-empty blocks in order with exactly one blank line between them."""
    return BLOCK_SEPARATOR.join(block for block in blocks if block)


def sanitize_filename(title: str, index: int) -> str:
    """Artifact filename for one tweak.

    Characters outside ``[A-Za-z0-9_-]`` become ``_``; a blank title falls
    back to ``tweak-N`` where N is the 1-based position in the selection.
    """
    stem = re.sub(r"[^A-Za-z0-9_-]", "_", title.strip())
    return f"{stem or f'tweak-{index + 1}'}.ps1"
