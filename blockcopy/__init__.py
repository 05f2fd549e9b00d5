"""blockcopy: export outline blocks to Markdown, AsciiDoc and HTML."""

from __future__ import annotations

from .errors import ExportError
from .models import Block, ExportOptions, ExportResult, Token, TokenKind
from .tokenizer import tokenize

__version__ = "0.1.0"

__all__ = [
    "Block",
    "ExportError",
    "ExportOptions",
    "ExportResult",
    "Token",
    "TokenKind",
    "__version__",
    "tokenize",
]
