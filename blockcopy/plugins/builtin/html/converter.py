"""Outline to HTML conversion.

The root block is emitted bare; its descendants become nested ``<ul>`` lists
with one ``<li>`` per block.
"""

from __future__ import annotations

from blockcopy.models import Block, ExportOptions, ExportResult
from blockcopy.outline import (
    Step,
    count_blocks,
    format_value,
    has_properties_section,
    is_heading,
    parse_heading,
    visible_children,
    visible_properties,
    walk,
)
from blockcopy.tokenizer import tokenize

from .generator import escape_html, generate

FORMAT_ID = "html"
LINE_BREAK = "<br>"


def _render(content: str) -> str:
    return generate(tokenize(content))


def _heading(line: str) -> str:
    heading = parse_heading(line)
    if heading is None:
        return _render(line)
    level, text = heading
    return f"<h{level}>{_render(text)}</h{level}>"


def convert_content(content: str) -> str:
    """Convert the raw content of one block to an HTML fragment."""

    if not content or not content.strip():
        return ""

    lines = content.split("\n")
    if is_heading(lines[0]):
        heading = _heading(lines[0])
        if len(lines) == 1:
            return heading
        # headings are block level, so no break directly after one
        rest = _render("\n".join(lines[1:]))
        return heading + rest.replace("\n", LINE_BREAK)

    return _render(content).replace("\n", LINE_BREAK)


def convert_properties(block: Block, options: ExportOptions) -> str:
    parts = ['<div class="properties"><strong>Properties:</strong><ul>']
    for key, value in visible_properties(block, options):
        parts.append(
            f"<li><strong>{escape_html(str(key))}</strong>: "
            f"{escape_html(format_value(value))}</li>"
        )
    parts.append("</ul></div>")
    return "".join(parts)


def convert_block(block: Block, options: ExportOptions) -> ExportResult:
    """Convert ``block`` and its descendants to HTML."""

    parts: list[str] = []
    for step, current, depth in walk(block, options, leave=True):
        has_children = bool(visible_children(current, depth, options))

        if step is Step.LEAVE:
            if has_children:
                parts.append("</ul>")
            if depth:
                parts.append("</li>")
            continue

        content = convert_content(current.content)
        if depth:
            parts.append(f"<li>{content}")
        elif content.strip():
            parts.append(content)
        if has_properties_section(current, options):
            parts.append(convert_properties(current, options))
        if has_children:
            parts.append("<ul>")

    return ExportResult(
        content="".join(parts),
        format=FORMAT_ID,
        block_count=count_blocks(block, options),
    )


__all__ = ["FORMAT_ID", "convert_block", "convert_content", "convert_properties"]
