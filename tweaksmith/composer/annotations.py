"""Comment block placed above a tweak's code when comments are enabled."""
from __future__ import annotations

import re

from tweaksmith.config.models import Tweak


def tweak_comment_block(tweak: Tweak) -> str:
    """Build the ``#`` comment header for ``tweak``.

    One comment line per non-empty description line, followed by a metadata
    line with download/report counts and the author comment.
    """
    description = tweak.description.replace("\r\n", "\n").replace("\r", "\n")
    lines = [f"# {line.strip()}" for line in description.split("\n") if line.strip()]

    comment = re.sub(r"\s+", " ", tweak.tweak_comment).strip()
    lines.append(
        f"# Downloads: {tweak.download_count} | Reports: {tweak.report_count}"
        f" | Comment: {comment}".rstrip()
    )
    return "\n".join(lines)
