"""
Tweaksmith Sensitive-Data Redactor

Masks likely secrets and personal data in script text before it is shown or
exported. Three ordered passes run over the text:

1. Email addresses
2. Secret-ish ``key: value`` / ``key=value`` assignments (value >= 8 chars)
3. Long opaque tokens, with a dedicated pass for access-key-style prefixes

Placeholders are bracketed so that none of them can match any pass again,
which makes ``redact`` idempotent.
"""
from __future__ import annotations

import re
import threading
from typing import Any, Dict, List, Optional, Pattern, Tuple

EMAIL_PLACEHOLDER = "[REDACTED_EMAIL]"
SECRET_PLACEHOLDER = "[REDACTED]"
ACCESS_KEY_PLACEHOLDER = "[REDACTED_KEY]"

# Shortest run of [A-Za-z0-9_-] treated as an opaque token. Long cmdlet
# names such as Set-DnsClientServerAddress stay below it.
MIN_OPAQUE_TOKEN_LENGTH = 32

# Minimum length of a secret value in a key/value assignment
MIN_SECRET_VALUE_LENGTH = 8

_TOKEN_CHARS = r"A-Za-z0-9_\-"


def _standalone(body: str) -> str:
    """Anchor a token pattern so it only matches a maximal run of token chars."""
    return rf"(?<![{_TOKEN_CHARS}]){body}(?![{_TOKEN_CHARS}])"


class SensitiveDataRedactor:
    """
    Redacts sensitive information from script text.

    Patterns run in list order; each pass sees the output of the previous one.
    """

    EMAIL_PATTERN: Pattern = re.compile(
        r"[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}"
    )

    ASSIGNMENT_PATTERN: Pattern = re.compile(
        r"(?i)(api[_-]?key|secret|token|password)[ \t]*[:=][ \t]*['\"]?"
        rf"[A-Za-z0-9\-_=+./]{{{MIN_SECRET_VALUE_LENGTH},}}['\"]?"
    )

    # AWS access key ids (AKIA/ABIA/ACCA/ASIA + 16)
    ACCESS_KEY_PATTERN: Pattern = re.compile(
        _standalone(r"(?:A3T[A-Z0-9]|AKIA|ABIA|ACCA|ASIA)[A-Z0-9]{16}")
    )

    def __init__(self, enabled: bool = True, min_token_length: int = MIN_OPAQUE_TOKEN_LENGTH):
        """
        Initialize the redactor.

        Args:
            enabled: Whether redaction is enabled (default True)
            min_token_length: Shortest opaque token that gets masked
        """
        # Placeholder bodies must stay below the threshold or they get re-masked
        if min_token_length <= len("REDACTED_EMAIL"):
            raise ValueError(
                f"min_token_length must be greater than {len('REDACTED_EMAIL')}"
            )
        self.enabled = enabled
        self.min_token_length = min_token_length
        self.opaque_token_pattern = re.compile(
            _standalone(rf"[{_TOKEN_CHARS}]{{{min_token_length},}}")
        )

    @property
    def redaction_patterns(self) -> List[Tuple[str, Pattern, str]]:
        """Ordered (name, pattern, replacement) passes."""
        return [
            ("email", self.EMAIL_PATTERN, EMAIL_PLACEHOLDER),
            ("secret_assignment", self.ASSIGNMENT_PATTERN, rf"\1: {SECRET_PLACEHOLDER}"),
            ("access_key", self.ACCESS_KEY_PATTERN, ACCESS_KEY_PLACEHOLDER),
            ("opaque_token", self.opaque_token_pattern, SECRET_PLACEHOLDER),
        ]

    def redact_string(self, text: Optional[str]) -> Optional[str]:
        """
        Redact sensitive information from a string.

        Args:
            text: The text to redact. ``None`` and ``""`` are returned unchanged.

        Returns:
            Redacted text with sensitive data replaced
        """
        if not self.enabled or not text:
            return text

        result = text
        for _name, pattern, replacement in self.redaction_patterns:
            result = pattern.sub(replacement, result)
        return result

    def scan(self, text: Optional[str]) -> List[Dict[str, Any]]:
        """Report which passes would change ``text`` and how many spans each masks.

        Passes are evaluated in order on progressively redacted text, so the
        counts match what ``redact_string`` replaces.
        """
        findings: List[Dict[str, Any]] = []
        if not text:
            return findings

        current = text
        for name, pattern, replacement in self.redaction_patterns:
            current, count = pattern.subn(replacement, current)
            if count:
                findings.append({"name": name, "count": count})
        return findings


# Shared default redactor (configuration only, no mutable state)
_redactor: Optional[SensitiveDataRedactor] = None
_redactor_lock = threading.Lock()


def get_redactor() -> SensitiveDataRedactor:
    """Get the shared default redactor instance."""
    global _redactor
    if _redactor is None:
        with _redactor_lock:
            if _redactor is None:
                _redactor = SensitiveDataRedactor()
    return _redactor


def redact(text: Optional[str]) -> Optional[str]:
    """Mask emails, secret assignments and long opaque tokens in ``text``."""
    return get_redactor().redact_string(text)
