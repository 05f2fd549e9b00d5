"""blockcopy export error types."""

from __future__ import annotations


class ExportError(RuntimeError):
    """Raised when converting or exporting blocks fails."""


__all__ = ["ExportError"]
