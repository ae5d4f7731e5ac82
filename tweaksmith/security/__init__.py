"""Tweaksmith security helpers."""

from tweaksmith.security.redactor import SensitiveDataRedactor, get_redactor, redact

__all__ = ["SensitiveDataRedactor", "get_redactor", "redact"]
