"""Tokenizer for outliner block content.

The scanner walks the content left to right. At each position the matchers in
``MATCHERS`` are tried in order and the first one that succeeds produces the
next token. When none matches, a plain text run is emitted. Every character of
the input ends up in exactly one token, so the ``source_length`` values of the
returned tokens always add up to ``len(content)``.
"""

from __future__ import annotations

import re
from typing import Callable, Sequence

from .models import TaskType, Token, TokenKind, TokenMetadata, VideoType

Matcher = Callable[[str, int], Token | None]

_CODE_BLOCK_RE = re.compile(r"```([A-Za-z0-9_]+)?\n([\s\S]*?)```")
_VIDEO_URL_RE = re.compile(r"\{\{video\s+(https?://[^}]+)\}\}")
_YOUTUBE_ID_RE = re.compile(r"\{\{youtube\s+([^}]+)\}\}")
_VIMEO_ID_RE = re.compile(r"\{\{vimeo\s+([^}]+)\}\}")
_QUERY_RE = re.compile(r"\{\{query\s+([^}]+)\}\}")
_TASK_MARKER_RE = re.compile(r"(TODO|DONE|DOING|LATER|NOW)\s+")
_BLOCKQUOTE_RE = re.compile(r"> ?(.*)")
_IMAGE_RE = re.compile(r"!\[([^\]]*)\]\(([^)]+)\)")
_LINK_RE = re.compile(r"\[([^\]]+)\]\(([^)]+)\)")
_BLOCK_REF_RE = re.compile(r"\[\[([^\]]+)\]\]")
_NAKED_URL_RE = re.compile(r"https?://[^\s)\]]+")
_HIGHLIGHT_RE = re.compile(r"==([^=]+)==")
_BOLD_RE = re.compile(r"\*\*([^*]+)\*\*")
_TAG_RE = re.compile(r"#([A-Za-z0-9_-]+)")

_EXTERNAL_URL_RE = re.compile(r"https?://")
_YOUTUBE_ID_IN_URL_RE = re.compile(r"(?:youtube\.com/watch\?v=|youtu\.be/)([^&?]+)")
_VIMEO_ID_IN_URL_RE = re.compile(r"vimeo\.com/(\d+)")

# Characters that may open a token, a URL scheme, or a line break that hands
# over to a blockquote or task marker on the next line.
_TEXT_STOP_RE = re.compile(
    r"[\[#=*`{!]|https?://|\n(?=>|(?:TODO|DONE|DOING|LATER|NOW)\s)"
)


def _at_line_start(content: str, pos: int) -> bool:
    return pos == 0 or content[pos - 1] == "\n"


def _is_external(target: str) -> bool:
    return _EXTERNAL_URL_RE.match(target) is not None


def detect_video_type(url: str) -> VideoType:
    if "youtube.com" in url or "youtu.be" in url:
        return VideoType.YOUTUBE
    if "vimeo.com" in url:
        return VideoType.VIMEO
    return VideoType.OTHER


def extract_video_id(url: str, video_type: VideoType) -> str | None:
    if video_type is VideoType.YOUTUBE:
        match = _YOUTUBE_ID_IN_URL_RE.search(url)
    elif video_type is VideoType.VIMEO:
        match = _VIMEO_ID_IN_URL_RE.search(url)
    else:
        return None
    return match.group(1) if match else None


def match_code_block(content: str, pos: int) -> Token | None:
    match = _CODE_BLOCK_RE.match(content, pos)
    if match is None:
        return None
    return Token(
        kind=TokenKind.CODE_BLOCK,
        value=match.group(2),
        source_length=match.end() - pos,
        metadata=TokenMetadata(language=match.group(1) or ""),
    )


def _video_token(url: str, length: int, video_type: VideoType, video_id: str | None) -> Token:
    return Token(
        kind=TokenKind.VIDEO_EMBED,
        value=url,
        source_length=length,
        metadata=TokenMetadata(
            link_target=url,
            video_type=video_type,
            video_id=video_id,
        ),
    )


def match_video_embed(content: str, pos: int) -> Token | None:
    match = _VIDEO_URL_RE.match(content, pos)
    if match is not None:
        url = match.group(1)
        video_type = detect_video_type(url)
        return _video_token(
            url, match.end() - pos, video_type, extract_video_id(url, video_type)
        )

    match = _YOUTUBE_ID_RE.match(content, pos)
    if match is not None:
        video_id = match.group(1).strip()
        url = f"https://www.youtube.com/watch?v={video_id}"
        return _video_token(url, match.end() - pos, VideoType.YOUTUBE, video_id)

    match = _VIMEO_ID_RE.match(content, pos)
    if match is not None:
        video_id = match.group(1).strip()
        url = f"https://vimeo.com/{video_id}"
        return _video_token(url, match.end() - pos, VideoType.VIMEO, video_id)

    return None


def match_macro(content: str, pos: int) -> Token | None:
    """Match ``{{...}}`` macros: video embeds first, then queries."""

    video = match_video_embed(content, pos)
    if video is not None:
        return video

    match = _QUERY_RE.match(content, pos)
    if match is None:
        return None
    return Token(
        kind=TokenKind.QUERY,
        value=match.group(1),
        source_length=match.end() - pos,
    )


def match_task_marker(content: str, pos: int) -> Token | None:
    if not _at_line_start(content, pos):
        return None
    match = _TASK_MARKER_RE.match(content, pos)
    if match is None:
        return None
    # The text after the keyword is tokenized on its own.
    return Token(
        kind=TokenKind.TASK_MARKER,
        value="",
        source_length=match.end() - pos,
        metadata=TokenMetadata(task_type=TaskType(match.group(1))),
    )


def match_blockquote(content: str, pos: int) -> Token | None:
    if not _at_line_start(content, pos):
        return None
    match = _BLOCKQUOTE_RE.match(content, pos)
    if match is None:
        return None
    return Token(
        kind=TokenKind.BLOCKQUOTE,
        value=match.group(1),
        source_length=match.end() - pos,
    )


def match_image(content: str, pos: int) -> Token | None:
    match = _IMAGE_RE.match(content, pos)
    if match is None:
        return None
    alt_text, target = match.group(1), match.group(2)
    return Token(
        kind=TokenKind.IMAGE,
        value=alt_text,
        source_length=match.end() - pos,
        metadata=TokenMetadata(
            alt_text=alt_text,
            link_target=target,
            is_external_url=_is_external(target),
        ),
    )


def match_markdown_link(content: str, pos: int) -> Token | None:
    match = _LINK_RE.match(content, pos)
    if match is None:
        return None
    text, target = match.group(1), match.group(2)
    return Token(
        kind=TokenKind.MARKDOWN_LINK,
        value=text,
        source_length=match.end() - pos,
        metadata=TokenMetadata(
            link_text=text,
            link_target=target,
            is_external_url=_is_external(target),
        ),
    )


def match_block_ref(content: str, pos: int) -> Token | None:
    match = _BLOCK_REF_RE.match(content, pos)
    if match is None:
        return None
    return Token(
        kind=TokenKind.BLOCK_REF,
        value=match.group(1),
        source_length=match.end() - pos,
        metadata=TokenMetadata(link_target=match.group(1)),
    )


def match_naked_url(content: str, pos: int) -> Token | None:
    match = _NAKED_URL_RE.match(content, pos)
    if match is None:
        return None
    url = match.group(0)
    return Token(
        kind=TokenKind.NAKED_URL,
        value=url,
        source_length=len(url),
        metadata=TokenMetadata(link_target=url, is_external_url=True),
    )


def _simple_matcher(pattern: re.Pattern[str], kind: TokenKind) -> Matcher:
    def matcher(content: str, pos: int) -> Token | None:
        match = pattern.match(content, pos)
        if match is None:
            return None
        return Token(kind=kind, value=match.group(1), source_length=match.end() - pos)

    matcher.__name__ = f"match_{kind.value}"
    return matcher


match_highlight = _simple_matcher(_HIGHLIGHT_RE, TokenKind.HIGHLIGHT)
match_bold = _simple_matcher(_BOLD_RE, TokenKind.BOLD)
match_tag = _simple_matcher(_TAG_RE, TokenKind.TAG)


def match_text(content: str, pos: int) -> Token:
    """Consume plain text up to the next position where a token could start."""

    stop = _TEXT_STOP_RE.search(content, pos)
    if stop is None:
        end = len(content)
    else:
        end = stop.start()
        if stop.group(0) == "\n":
            # keep the newline so the next token starts a line
            end += 1
    length = max(1, end - pos)
    return Token(
        kind=TokenKind.TEXT,
        value=content[pos : pos + length],
        source_length=length,
    )


MATCHERS: tuple[Matcher, ...] = (
    match_code_block,
    match_macro,
    match_task_marker,
    match_blockquote,
    match_image,
    match_markdown_link,
    match_block_ref,
    match_naked_url,
    match_highlight,
    match_bold,
    match_tag,
)


def tokenize(content: str, matchers: Sequence[Matcher] = MATCHERS) -> list[Token]:
    """Split ``content`` into tokens, in source order."""

    tokens: list[Token] = []
    position = 0
    length = len(content)

    while position < length:
        token: Token | None = None
        for matcher in matchers:
            token = matcher(content, position)
            if token is not None:
                break
        if token is None:
            token = match_text(content, position)
        tokens.append(token)
        position += token.source_length

    return tokens


__all__ = [
    "MATCHERS",
    "Matcher",
    "detect_video_type",
    "extract_video_id",
    "match_text",
    "tokenize",
]
