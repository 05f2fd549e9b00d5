"""Built-in Markdown format plugin for blockcopy."""

from __future__ import annotations

from blockcopy.config import BlockcopyConfig

from ... import FormatContribution, hookimpl
from .converter import FORMAT_ID, convert_block
from .generator import generate

PLUGIN_ID = "blockcopy-builtin-markdown"


def render_document(content: str, *, title: str) -> str:
    """Prefix the converted outline with a top-level title."""

    return f"# {title}\n\n{content}\n"


@hookimpl
def export_formats(config: BlockcopyConfig) -> tuple[FormatContribution, ...]:
    """Expose the built-in Markdown converter as a plugin contribution."""

    _ = config  # markdown output has no plugin settings
    contribution = FormatContribution(
        format_id=FORMAT_ID,
        converter=convert_block,
        description="GitHub-flavoured Markdown with nested bullet lists",
        document_renderer=render_document,
    )
    return (contribution,)


__all__ = [
    "FORMAT_ID",
    "PLUGIN_ID",
    "convert_block",
    "export_formats",
    "generate",
    "render_document",
]
