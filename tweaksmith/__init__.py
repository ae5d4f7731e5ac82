"""
Tweaksmith - Compose remediation tweaks into one distributable script.

Tweaksmith provides:
- Script composition with cleanup, redaction and annotations
- Rollback preamble and completion/reboot postamble for exported scripts
- Line tokenizing for syntax-highlighted previews
- A preview/edit presentation engine with wrap-aware line numbering
"""

__version__ = "0.3.1"
