"""Outline to Markdown conversion."""

from __future__ import annotations

import logging

from blockcopy.models import Block, ExportOptions, ExportResult
from blockcopy.outline import (
    count_blocks,
    format_value,
    has_properties_section,
    visible_properties,
    walk,
)
from blockcopy.tokenizer import tokenize

from .generator import generate

FORMAT_ID = "markdown"

logger = logging.getLogger(__name__)


def _is_quote_or_empty(line: str) -> bool:
    stripped = line.strip()
    return stripped == "" or stripped.startswith(">")


def _nest_lines(lines: list[str], indent: str) -> str:
    """Bullet the first line and hang the rest under it.

    A trailing backslash forces a hard line break. It is left off the last
    line, lines that are quotes or empty, and any line followed by a quote or
    an empty line.
    """

    rendered: list[str] = []
    last = len(lines) - 1
    for index, line in enumerate(lines):
        prefix = f"{indent}- " if index == 0 else f"{indent}  "
        hard_break = (
            index < last
            and not _is_quote_or_empty(line)
            and not _is_quote_or_empty(lines[index + 1])
        )
        rendered.append(f"{prefix}{line}\\" if hard_break else f"{prefix}{line}")
    return "\n".join(rendered)


def convert_content(content: str, depth: int) -> str:
    """Convert the raw content of one block at ``depth``."""

    if not content or not content.strip():
        return ""

    tokens = tokenize(content)
    logger.debug("Block at depth %d produced %d tokens", depth, len(tokens))
    converted = generate(tokens)

    if depth == 0:
        return converted

    indent = "  " * depth
    lines = converted.split("\n")

    if converted.startswith("```"):
        # fences keep working only without a bullet in front of them
        return "\n".join(f"{indent}{line}" for line in lines)

    if len(lines) == 1:
        return f"{indent}- {converted}"

    return _nest_lines(lines, indent)


def convert_properties(block: Block, options: ExportOptions) -> str:
    lines = ["**Properties:**"]
    for key, value in visible_properties(block, options):
        lines.append(f"- **{key}**: {format_value(value)}")
    return "\n".join(lines)


def convert_block(block: Block, options: ExportOptions) -> ExportResult:
    """Convert ``block`` and its descendants to Markdown."""

    lines: list[str] = []
    for _, current, depth in walk(block, options):
        content = convert_content(current.content, depth)
        if content.strip():
            lines.append(content)
        if has_properties_section(current, options):
            lines.append(convert_properties(current, options))

    return ExportResult(
        content="\n".join(lines),
        format=FORMAT_ID,
        block_count=count_blocks(block, options),
    )


__all__ = ["FORMAT_ID", "convert_block", "convert_content", "convert_properties"]
