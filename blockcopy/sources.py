"""Block retrieval from outline files on disk.

Two families of files are understood:

* ``.json`` / ``.yaml`` / ``.yml`` files holding blocks in the shape returned
  by the outliner's editor API (``uuid``, ``content``, ``children``,
  ``properties``), either a single block mapping or a list of them;
* ``.md`` outliner pages, where every block is a ``- `` bullet and nesting
  follows indentation.

Blocks without an explicit identifier are addressed by their position in the
page: ``"1"`` is the first top-level block, ``"1.2"`` its second child.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Protocol

import yaml

from .models import Block

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIXES = frozenset({".md", ".markdown"})
DATA_SUFFIXES = frozenset({".json", ".yaml", ".yml"})

_BULLET_RE = re.compile(r"^([ \t]*)-(?:[ \t](.*))?$")
_PROPERTY_RE = re.compile(r"^\s*([A-Za-z0-9_-]+):: ?(.*)$")
_ID_PROPERTY = "id"
_FENCE = "```"


class SourceError(RuntimeError):
    """Raised when an outline cannot be read or understood."""


class BlockSource(Protocol):
    """Supplier of block trees to export."""

    def get_block_with_children(
        self, block_id: str, max_depth: int | None
    ) -> Block | None:  # pragma: no cover - Protocol
        """Return the block with descendants, or ``None`` when it is unknown."""

    def get_page_blocks(self) -> list[Block]:  # pragma: no cover - Protocol
        """Return the top-level blocks of the page, in order."""


def truncate_children(block: Block, max_depth: int | None) -> Block:
    """Return a copy of ``block`` holding children down to ``max_depth``.

    Children of a block at depth ``d`` are kept while ``d < max_depth``.
    """

    if max_depth is None:
        return block

    stack: list[tuple[Block, int, bool]] = [(block, 0, False)]
    built: list[Block] = []
    while stack:
        node, depth, expanded = stack.pop()
        if depth >= max_depth or not node.children:
            built.append(replace(node, children=None))
            continue
        if expanded:
            count = len(node.children)
            children = tuple(built[-count:])
            del built[-count:]
            built.append(replace(node, children=children))
            continue
        stack.append((node, depth, True))
        for child in reversed(node.children):
            stack.append((child, depth + 1, False))
    return built[0]


def find_block(blocks: list[Block], block_id: str) -> Block | None:
    """Depth-first search for ``block_id`` among ``blocks`` and descendants."""

    stack = list(reversed(blocks))
    while stack:
        block = stack.pop()
        if block.id == block_id:
            return block
        if block.children:
            stack.extend(reversed(block.children))
    return None


def block_from_mapping(data: Any, position: str) -> Block:
    """Build a block tree from an editor API style mapping."""

    if not isinstance(data, dict):
        raise SourceError(f"Block {position} must be a mapping")

    block_id = data.get("uuid") or data.get("id") or position
    content = data.get("content")
    if content is None:
        content = ""
    elif not isinstance(content, str):
        raise SourceError(f"Block {position}: 'content' must be a string")

    properties = data.get("properties")
    if properties is not None and not isinstance(properties, dict):
        raise SourceError(f"Block {position}: 'properties' must be a mapping")

    raw_children = data.get("children")
    children: tuple[Block, ...] | None = None
    if raw_children is not None:
        if not isinstance(raw_children, list):
            raise SourceError(f"Block {position}: 'children' must be a list")
        children = tuple(
            block_from_mapping(child, f"{position}.{index}")
            for index, child in enumerate(raw_children, start=1)
        )

    return Block(
        id=str(block_id),
        content=content,
        children=children,
        properties=properties,
    )


def blocks_from_data(data: Any) -> list[Block]:
    """Build top-level blocks from decoded JSON or YAML data."""

    if data is None:
        return []
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise SourceError("Outline data must be a block mapping or a list of blocks")
    return [
        block_from_mapping(item, str(index))
        for index, item in enumerate(data, start=1)
    ]


@dataclass(slots=True)
class _Draft:
    indent: int
    lines: list[str]
    children: list["_Draft"] = field(default_factory=list)
    in_fence: bool = False

    def __post_init__(self) -> None:
        if self.lines and self.lines[0].count(_FENCE) % 2:
            self.in_fence = True

    def append_line(self, line: str) -> None:
        # continuation lines sit two columns right of the bullet
        width = len(line) - len(line.lstrip(" \t"))
        self.lines.append(line[min(width, self.indent + 2) :])
        if line.strip().startswith(_FENCE):
            self.in_fence = not self.in_fence


def _indent_width(whitespace: str) -> int:
    return len(whitespace.expandtabs(2))


def _properties_of(lines: list[str]) -> dict[str, str] | None:
    properties: dict[str, str] = {}
    for line in lines:
        match = _PROPERTY_RE.match(line)
        if match:
            properties[match.group(1)] = match.group(2).strip()
    return properties or None


def _freeze(drafts: list[_Draft]) -> list[Block]:
    """Turn parsed drafts into blocks, assigning positional ids."""

    stack: list[tuple[_Draft, str, bool]] = [
        (draft, str(index), False)
        for index, draft in reversed(list(enumerate(drafts, start=1)))
    ]
    built: list[Block] = []
    while stack:
        draft, position, expanded = stack.pop()
        if draft.children and not expanded:
            stack.append((draft, position, True))
            for index, child in reversed(list(enumerate(draft.children, start=1))):
                stack.append((child, f"{position}.{index}", False))
            continue

        children: tuple[Block, ...] | None = None
        if draft.children:
            count = len(draft.children)
            children = tuple(built[-count:])
            del built[-count:]

        lines = list(draft.lines)
        while lines and not lines[-1].strip():
            lines.pop()
        properties = _properties_of(lines)
        block_id = position
        if properties and properties.get(_ID_PROPERTY):
            block_id = properties[_ID_PROPERTY]
        built.append(
            Block(
                id=block_id,
                content="\n".join(lines),
                children=children,
                properties=properties,
            )
        )
    return built


def parse_markdown_page(text: str) -> list[Block]:
    """Parse an outliner page written as nested ``- `` bullets.

    Text before the first bullet (page properties, usually) becomes a block of
    its own. Lines inside a fenced code block belong to the block that opened
    the fence, even when they look like bullets.
    """

    roots: list[_Draft] = []
    open_drafts: list[_Draft] = []
    preamble: list[str] = []

    for line in text.splitlines():
        if open_drafts and open_drafts[-1].in_fence:
            open_drafts[-1].append_line(line)
            continue

        match = _BULLET_RE.match(line)
        if match is None:
            if open_drafts:
                open_drafts[-1].append_line(line)
            elif line.strip() or preamble:
                preamble.append(line)
            continue

        indent = _indent_width(match.group(1))
        draft = _Draft(indent=indent, lines=[match.group(2) or ""])
        while open_drafts and open_drafts[-1].indent >= indent:
            open_drafts.pop()
        if open_drafts:
            open_drafts[-1].children.append(draft)
        else:
            roots.append(draft)
        open_drafts.append(draft)

    if preamble:
        roots.insert(0, _Draft(indent=-2, lines=preamble))

    return _freeze(roots)


class OutlineFileSource:
    """Read-only ``BlockSource`` backed by one outline file."""

    def __init__(self, path: Path) -> None:
        self.path = path
        self._blocks: list[Block] | None = None

    def _load(self) -> list[Block]:
        if self._blocks is not None:
            return self._blocks

        suffix = self.path.suffix.lower()
        if suffix not in MARKDOWN_SUFFIXES and suffix not in DATA_SUFFIXES:
            raise SourceError(f"Unsupported outline file type: {self.path.name}")

        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as exc:
            raise SourceError(f"Cannot read outline file {self.path}: {exc}") from exc

        if suffix in MARKDOWN_SUFFIXES:
            blocks = parse_markdown_page(text)
        elif suffix == ".json":
            try:
                blocks = blocks_from_data(json.loads(text))
            except json.JSONDecodeError as exc:
                raise SourceError(f"Invalid JSON in {self.path}: {exc}") from exc
        else:
            try:
                blocks = blocks_from_data(yaml.safe_load(text))
            except yaml.YAMLError as exc:
                raise SourceError(f"Invalid YAML in {self.path}: {exc}") from exc

        logger.debug("Loaded %d top-level block(s) from %s", len(blocks), self.path)
        self._blocks = blocks
        return blocks

    def get_page_blocks(self) -> list[Block]:
        return list(self._load())

    def get_block_with_children(
        self, block_id: str, max_depth: int | None
    ) -> Block | None:
        block = find_block(self._load(), block_id)
        if block is None:
            return None
        return truncate_children(block, max_depth)


__all__ = [
    "BlockSource",
    "OutlineFileSource",
    "SourceError",
    "block_from_mapping",
    "blocks_from_data",
    "find_block",
    "parse_markdown_page",
    "truncate_children",
]
