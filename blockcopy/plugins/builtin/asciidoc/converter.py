"""Outline to AsciiDoc conversion.

AsciiDoc list depth is expressed by the number of ``*`` characters in the
marker. Outlines often nest content under one or more headings, and a heading
cannot carry a list marker. To keep lists readable, the first list item after
the start of the document or after any heading always renders at depth 1,
and later items are measured relative to it. The offset is tracked by a
``ListDepthState`` created for each conversion call.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from blockcopy.models import Block, ExportOptions, ExportResult
from blockcopy.outline import (
    count_blocks,
    format_value,
    has_properties_section,
    is_heading,
    parse_heading,
    visible_properties,
    walk,
)
from blockcopy.tokenizer import tokenize

from .generator import generate

FORMAT_ID = "asciidoc"
LIST_BULLET = "*"
CONTINUATION = "+"

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ListDepthState:
    """Offset between outline depth and rendered list depth.

    ``offset`` is ``None`` until the first list item following a reset.
    """

    offset: int | None = None

    def reset(self) -> None:
        self.offset = None

    def marker(self, depth: int) -> str:
        if self.offset is None:
            self.offset = depth - 1
            logger.debug("List depth offset set to %d at depth %d", self.offset, depth)
        return LIST_BULLET * max(1, depth - self.offset)


def _discrete_heading(line: str) -> str:
    heading = parse_heading(line)
    if heading is None:
        return line
    level, text = heading
    # a single '=' is the document title, so section levels start at '=='
    return f"\n\n[discrete]\n{'=' * (level + 1)} {text}\n"


def _with_marker(line: str, marker: str, *, task: bool) -> str:
    if task:
        # the rendered task already starts with a bullet; swap it out
        return f"{marker}{line[1:]}"
    return f"{marker} {line}"


def _has_attributed_quote(converted: str) -> bool:
    return '\n"' in converted and "\n--" in converted


def _continue_lines(lines: list[str]) -> str:
    rendered: list[str] = []
    last = len(lines) - 1
    for index, line in enumerate(lines):
        if index == last:
            rendered.append(line)
        elif not line.strip():
            rendered.append(CONTINUATION)
            rendered.append(line)
        else:
            rendered.append(f"{line} {CONTINUATION}")
    return "\n".join(rendered)


def convert_content(content: str, depth: int, state: ListDepthState) -> str:
    """Convert the raw content of one block at ``depth``.

    ``state`` is updated when the block is a heading or the first list item
    after one.
    """

    if not content or not content.strip():
        return ""

    tokens = tokenize(content)
    logger.debug("Block at depth %d produced %d tokens", depth, len(tokens))
    converted = generate(tokens)
    lines = converted.split("\n")

    if is_heading(lines[0]):
        state.reset()
        heading = _discrete_heading(lines[0])
        if len(lines) > 1:
            return heading + "\n".join(lines[1:]) + "\n"
        return heading

    if converted.startswith("[source"):
        # listing blocks only render at the document root
        return f"\n{converted}"

    if depth == 0:
        return converted

    marker = state.marker(depth)
    task = converted.startswith(f"{LIST_BULLET} [")

    if len(lines) == 1:
        return _with_marker(converted, marker, task=task)

    if _has_attributed_quote(converted):
        while lines and not lines[-1].strip():
            lines.pop()
        if not lines[0].strip():
            return f"{marker} " + "\n".join(lines[1:])
        first = _with_marker(lines[0], marker, task=task)
        return first + "\n" + "\n".join(lines[1:])

    lines[0] = _with_marker(lines[0], marker, task=task)
    return _continue_lines(lines)


def convert_properties(block: Block, options: ExportOptions) -> str:
    lines = ["*Properties:*", ""]
    for key, value in visible_properties(block, options):
        lines.append(f"* *{key}*: {format_value(value)}")
    return "\n".join(lines)


def convert_block(block: Block, options: ExportOptions) -> ExportResult:
    """Convert ``block`` and its descendants to AsciiDoc."""

    state = ListDepthState()
    lines: list[str] = []
    for _, current, depth in walk(block, options):
        content = convert_content(current.content, depth, state)
        if content.strip():
            lines.append(content)
        if has_properties_section(current, options):
            lines.append(convert_properties(current, options))

    return ExportResult(
        content="\n".join(lines),
        format=FORMAT_ID,
        block_count=count_blocks(block, options),
    )


__all__ = [
    "FORMAT_ID",
    "ListDepthState",
    "convert_block",
    "convert_content",
    "convert_properties",
]
