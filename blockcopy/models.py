"""Data shapes shared by the tokenizer, generators and converters."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Mapping


class TokenKind(StrEnum):
    """Classification of a span of block content."""

    TEXT = "text"
    BLOCK_REF = "blockRef"
    MARKDOWN_LINK = "markdownLink"
    NAKED_URL = "nakedUrl"
    IMAGE = "image"
    VIDEO_EMBED = "videoEmbed"
    TAG = "tag"
    HIGHLIGHT = "highlight"
    BOLD = "bold"
    CODE_BLOCK = "codeBlock"
    QUERY = "query"
    TASK_MARKER = "taskMarker"
    BLOCKQUOTE = "blockquote"


class TaskType(StrEnum):
    TODO = "TODO"
    DONE = "DONE"
    DOING = "DOING"
    LATER = "LATER"
    NOW = "NOW"


class VideoType(StrEnum):
    YOUTUBE = "youtube"
    VIMEO = "vimeo"
    OTHER = "other"


@dataclass(slots=True, frozen=True)
class TokenMetadata:
    """Kind-dependent extras attached to a token."""

    language: str | None = None
    task_type: TaskType | None = None
    link_target: str | None = None
    link_text: str | None = None
    alt_text: str | None = None
    video_type: VideoType | None = None
    video_id: str | None = None
    is_external_url: bool | None = None


EMPTY_METADATA = TokenMetadata()


@dataclass(slots=True, frozen=True)
class Token:
    """One classified span of block content.

    ``source_length`` is the number of characters consumed from the original
    content, which can differ from ``len(value)``.
    """

    kind: TokenKind
    value: str
    source_length: int
    metadata: TokenMetadata = EMPTY_METADATA


@dataclass(slots=True, frozen=True)
class Block:
    """A node of the source outline.

    ``children`` and ``properties`` are ``None`` when the source did not
    provide them, which is distinct from an empty collection.
    """

    id: str
    content: str
    children: tuple["Block", ...] | None = None
    properties: Mapping[str, Any] | None = None


@dataclass(slots=True, frozen=True)
class ExportOptions:
    format: str = "markdown"
    include_children: bool = True
    include_properties: bool = False
    max_depth: int | None = None


@dataclass(slots=True, frozen=True)
class ExportResult:
    content: str
    format: str
    block_count: int


__all__ = [
    "Block",
    "EMPTY_METADATA",
    "ExportOptions",
    "ExportResult",
    "TaskType",
    "Token",
    "TokenKind",
    "TokenMetadata",
    "VideoType",
]
