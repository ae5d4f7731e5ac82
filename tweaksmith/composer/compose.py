"""
Tweaksmith Script Composer

Turns an ordered selection of tweaks plus a settings bundle into script text.

Per tweak:  cleanup -> redaction (hide_sensitive) -> annotation (show_comments)

With hide_sensitive on, the annotation header is redacted as well.

``compose`` returns the preview text (blocks joined, no wrapping).
``build_artifacts`` applies the export policy, checked in this order:

    1. a saved hand-edited override    -> one custom artifact, verbatim
    2. download_each_tweak             -> one artifact per tweak
    3. otherwise                       -> one combined artifact

and wraps every artifact with the preamble/postamble from ``powershell``.

A tweak that fails processing is never dropped: its raw code is used and a
``ComposeWarning`` is reported instead.
"""
from __future__ import annotations

import logging
import warnings
from dataclasses import dataclass, field
from typing import List, Mapping, Optional, Tuple

from tweaksmith.composer.annotations import tweak_comment_block
from tweaksmith.composer.cleanup import clean_tweak_code, combine_blocks, sanitize_filename
from tweaksmith.composer.powershell import (
    DEFAULT_REBOOT_TIMEOUT,
    wrap_script,
    wrap_tweaks_atomic,
)
from tweaksmith.config.models import EditorSettings, Tweak
from tweaksmith.security.redactor import SensitiveDataRedactor, get_redactor

logger = logging.getLogger(__name__)

EMPTY_SELECTION_PLACEHOLDER = (
    "# Tweaksmith script editor\n"
    "# Select tweaks to build your script."
)
COMBINED_SCRIPT_NAME = "tweaksmith-selection.ps1"
CUSTOM_SCRIPT_NAME = "tweaksmith-custom.ps1"


class TweakProcessingWarning(UserWarning):
    """Emitted by ``compose`` when a tweak had to be included unprocessed."""


@dataclass(frozen=True)
class ComposeWarning:
    """A non-fatal problem met while composing one tweak."""
    tweak_id: str
    title: str
    message: str

    def __str__(self) -> str:
        subject = self.title or self.tweak_id
        return f"{subject}: {self.message}" if subject else self.message


@dataclass(frozen=True)
class ScriptArtifact:
    """One deliverable script file."""
    filename: str
    content: str


@dataclass
class ComposeResult:
    """Artifacts to deliver plus anything the caller should surface."""
    artifacts: List[ScriptArtifact] = field(default_factory=list)
    warnings: List[ComposeWarning] = field(default_factory=list)
    requires_confirmation: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.artifacts


def process_tweak(
    tweak: Tweak,
    settings: EditorSettings,
    redactor: Optional[SensitiveDataRedactor] = None,
) -> Tuple[str, Optional[ComposeWarning]]:
    """Clean, redact and annotate one tweak's code.

    Returns:
        (block, warning) where warning is None on success. On failure the
        block is the tweak's raw code.
    """
    try:
        redactor = (redactor or get_redactor()) if settings.hide_sensitive else None
        code = clean_tweak_code(tweak.code)
        if redactor is not None:
            code = redactor.redact_string(code)
        if settings.show_comments:
            # Descriptions and comments are user text and get masked too
            header = tweak_comment_block(tweak)
            if redactor is not None:
                header = redactor.redact_string(header)
            code = f"{header}\n{code}" if code else header
        return code, None
    except Exception as exc:
        logger.warning("Including tweak %s unprocessed: %s", tweak.id, exc)
        return tweak.code, ComposeWarning(
            tweak_id=tweak.id,
            title=tweak.title,
            message=f"processing failed ({exc}); included unprocessed",
        )


def _process_selection(
    selection: Mapping[str, Tweak],
    settings: EditorSettings,
    redactor: Optional[SensitiveDataRedactor],
) -> Tuple[List[Tuple[Tweak, str]], List[ComposeWarning]]:
    blocks: List[Tuple[Tweak, str]] = []
    problems: List[ComposeWarning] = []
    for tweak in selection.values():
        block, warning = process_tweak(tweak, settings, redactor)
        blocks.append((tweak, block))
        if warning is not None:
            problems.append(warning)
    return blocks, problems


def compose(
    selection: Mapping[str, Tweak],
    settings: EditorSettings,
    redactor: Optional[SensitiveDataRedactor] = None,
) -> str:
    """Preview text for ``selection``: processed blocks joined in selection order.

    An empty selection (or one with no code at all) yields
    ``EMPTY_SELECTION_PLACEHOLDER``. Processing failures are reported with
    ``TweakProcessingWarning``.
    """
    if not selection:
        return EMPTY_SELECTION_PLACEHOLDER

    blocks, problems = _process_selection(selection, settings, redactor)
    for problem in problems:
        warnings.warn(str(problem), TweakProcessingWarning, stacklevel=2)

    return combine_blocks(block for _, block in blocks) or EMPTY_SELECTION_PLACEHOLDER


def _unique_name(name: str, taken: set) -> str:
    if name not in taken:
        return name
    stem = name[: -len(".ps1")]
    n = 2
    while f"{stem}-{n}.ps1" in taken:
        n += 1
    return f"{stem}-{n}.ps1"


def build_artifacts(
    selection: Mapping[str, Tweak],
    settings: EditorSettings,
    override: Optional[str] = None,
    redactor: Optional[SensitiveDataRedactor] = None,
    reboot_timeout: int = DEFAULT_REBOOT_TIMEOUT,
) -> ComposeResult:
    """Build the wrapped script artifact(s) for export.

    Args:
        selection: Ordered tweak id -> Tweak mapping.
        settings: Settings bundle for this call.
        override: Saved hand-edited script; when non-empty it is exported
            verbatim as the only artifact.
        redactor: Redactor to use instead of the shared default.
        reboot_timeout: Seconds the generated reboot prompt waits.
    """
    result = ComposeResult(requires_confirmation=settings.always_show_warning)

    def wrap(code: str) -> str:
        return wrap_script(code, settings.auto_create_restore_point, reboot_timeout)

    if override:
        result.artifacts.append(ScriptArtifact(CUSTOM_SCRIPT_NAME, wrap(override)))
        return result

    if not selection:
        result.warnings.append(ComposeWarning("", "", "no tweaks selected"))
        return result

    blocks, result.warnings = _process_selection(selection, settings, redactor)

    if settings.download_each_tweak:
        taken: set = set()
        for i, (tweak, block) in enumerate(blocks):
            name = _unique_name(sanitize_filename(tweak.title, i), taken)
            taken.add(name)
            result.artifacts.append(ScriptArtifact(name, wrap(block)))
        logger.debug("Built %d per-tweak artifact(s)", len(result.artifacts))
        return result

    combined = wrap_tweaks_atomic([(tweak.title, block) for tweak, block in blocks])
    result.artifacts.append(ScriptArtifact(COMBINED_SCRIPT_NAME, wrap(combined)))
    return result
