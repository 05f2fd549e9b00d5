"""Built-in HTML format plugin for blockcopy."""

from __future__ import annotations

from blockcopy.config import BlockcopyConfig

from ... import FormatContribution, hookimpl
from .config import PLUGIN_ID, HtmlPluginConfig, resolve_plugin_config
from .converter import FORMAT_ID, convert_block
from .document import HtmlDocumentRenderer
from .generator import escape_html, generate


@hookimpl
def export_formats(config: BlockcopyConfig) -> tuple[FormatContribution, ...]:
    """Expose the built-in HTML converter as a plugin contribution."""

    renderer = HtmlDocumentRenderer(resolve_plugin_config(config))
    contribution = FormatContribution(
        format_id=FORMAT_ID,
        converter=convert_block,
        description="HTML fragment with nested lists and embedded media",
        document_renderer=renderer,
    )
    return (contribution,)


__all__ = [
    "FORMAT_ID",
    "HtmlDocumentRenderer",
    "HtmlPluginConfig",
    "PLUGIN_ID",
    "convert_block",
    "escape_html",
    "export_formats",
    "generate",
]
