"""Built-in AsciiDoc format plugin for blockcopy."""

from __future__ import annotations

from blockcopy.config import BlockcopyConfig

from ... import FormatContribution, hookimpl
from .converter import FORMAT_ID, ListDepthState, convert_block
from .generator import generate

PLUGIN_ID = "blockcopy-builtin-asciidoc"


def render_document(content: str, *, title: str) -> str:
    """Put a document title header above the converted outline."""

    return f"= {title}\n\n{content}\n"


@hookimpl
def export_formats(config: BlockcopyConfig) -> tuple[FormatContribution, ...]:
    """Expose the built-in AsciiDoc converter as a plugin contribution."""

    _ = config
    contribution = FormatContribution(
        format_id=FORMAT_ID,
        converter=convert_block,
        description="AsciiDoc with normalized list depth and discrete headings",
        document_renderer=render_document,
    )
    return (contribution,)


__all__ = [
    "FORMAT_ID",
    "ListDepthState",
    "PLUGIN_ID",
    "convert_block",
    "export_formats",
    "generate",
    "render_document",
]
