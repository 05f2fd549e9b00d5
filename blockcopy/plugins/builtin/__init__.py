"""Built-in blockcopy format plugins."""

from __future__ import annotations

from . import asciidoc, html, markdown

BUILTIN_PLUGINS = (markdown, asciidoc, html)

__all__ = ["BUILTIN_PLUGINS"]
