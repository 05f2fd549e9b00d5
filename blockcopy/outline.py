"""Structural helpers shared by the format converters.

Walking is done with an explicit stack so that very deep outlines cannot
exhaust the interpreter's recursion limit.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Any, Iterator

from .models import Block, ExportOptions

_HEADING_RE = re.compile(r"(#{1,6})\s")
_HEADING_TEXT_RE = re.compile(r"(#{1,6})\s+(.+)")


class Step(Enum):
    ENTER = "enter"
    LEAVE = "leave"


def is_heading(line: str) -> bool:
    """Return True when ``line`` opens with one to six ``#`` and whitespace."""

    return _HEADING_RE.match(line) is not None


def parse_heading(line: str) -> tuple[int, str] | None:
    """Return ``(level, text)`` for a heading line, or ``None``."""

    match = _HEADING_TEXT_RE.match(line)
    if match is None:
        return None
    return len(match.group(1)), match.group(2)


def depth_exceeded(depth: int, max_depth: int | None) -> bool:
    """Whether a block at ``depth`` lies below the configured limit.

    A zero or negative limit keeps the root only.
    """

    if max_depth is None:
        return False
    return depth > max(max_depth, 0)


def visible_children(block: Block, depth: int, options: ExportOptions) -> tuple[Block, ...]:
    """Children of ``block`` that will be rendered."""

    if not options.include_children or not block.children:
        return ()
    if depth_exceeded(depth + 1, options.max_depth):
        return ()
    return block.children


def walk(
    root: Block,
    options: ExportOptions,
    *,
    leave: bool = False,
) -> Iterator[tuple[Step, Block, int]]:
    """Yield the blocks to render in document order.

    With ``leave=True`` a ``Step.LEAVE`` event follows the last descendant of
    each entered block, which lets nested formats close their containers.
    """

    if depth_exceeded(0, options.max_depth):
        return

    stack: list[tuple[Step, Block, int]] = [(Step.ENTER, root, 0)]
    while stack:
        step, block, depth = stack.pop()
        yield step, block, depth
        if step is Step.LEAVE:
            continue
        if leave:
            stack.append((Step.LEAVE, block, depth))
        for child in reversed(visible_children(block, depth, options)):
            stack.append((Step.ENTER, child, depth + 1))


def count_blocks(root: Block, options: ExportOptions) -> int:
    """Count the blocks reachable through ``include_children``.

    ``max_depth`` is not consulted, so the count may exceed the number of
    blocks actually rendered when the depth limit truncates the tree.
    """

    count = 0
    stack = [root]
    while stack:
        block = stack.pop()
        count += 1
        if options.include_children and block.children:
            stack.extend(block.children)
    return count


def visible_properties(block: Block, options: ExportOptions) -> list[tuple[str, Any]]:
    """Properties to print for ``block``, in source order, without null values."""

    if not options.include_properties or not block.properties:
        return []
    return [(key, value) for key, value in block.properties.items() if value is not None]


def has_properties_section(block: Block, options: ExportOptions) -> bool:
    return bool(options.include_properties and block.properties)


def format_value(value: Any) -> str:
    """Render a scalar property value the way the host app displays it."""

    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ", ".join(format_value(item) for item in value)
    return str(value)


__all__ = [
    "Step",
    "count_blocks",
    "depth_exceeded",
    "format_value",
    "has_properties_section",
    "is_heading",
    "parse_heading",
    "visible_children",
    "visible_properties",
    "walk",
]
