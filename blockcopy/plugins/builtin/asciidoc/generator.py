"""Render tokens as AsciiDoc."""

from __future__ import annotations

import re
from typing import Callable, Iterable

from blockcopy.models import TaskType, Token, TokenKind, VideoType

_TASK_MARKERS = {
    TaskType.TODO: "* [ ] ",
    TaskType.DONE: "* [x] ",
    TaskType.DOING: "* [ ] 🔄 ",
    TaskType.LATER: "* [ ] ⏳ ",
    TaskType.NOW: "* [ ] 🔥 ",
}

_QUOTED_ATTRIBUTION_RE = re.compile(r'"(.+?)"\s*-\s*(.+)')
_LOOSE_ATTRIBUTION_RE = re.compile(r"(.+?)\s*-\s*(.+)")
MAX_AUTHOR_LENGTH = 50


def _text(token: Token) -> str:
    # A lone newline is what trails a quote line, and quotes bring their own.
    # Every other lone newline goes too, so tokens on adjacent lines join up.
    if token.value == "\n":
        return ""
    return token.value


def _strong(token: Token) -> str:
    return f"*{token.value}*"


def _link(token: Token) -> str:
    text = token.metadata.link_text or token.value
    target = token.metadata.link_target or ""
    if token.metadata.is_external_url:
        return f"{target}[{text}]"
    return f"*{text}* (→ {target})"


def _image(token: Token) -> str:
    alt_text = token.metadata.alt_text or ""
    source = token.metadata.link_target or ""
    if token.metadata.is_external_url:
        return f"image::{source}[{alt_text}]"
    return f"*[Image: {alt_text or 'no description'}]* (local file: {source})"


def _video(token: Token) -> str:
    video_type = token.metadata.video_type
    video_id = token.metadata.video_id
    if video_type is VideoType.YOUTUBE and video_id:
        return f"video::{video_id}[youtube]"
    if video_type is VideoType.VIMEO and video_id:
        return f"video::{video_id}[vimeo]"
    url = token.metadata.link_target or token.value
    return f"{url}[▶️ Video]"


def _code_block(token: Token) -> str:
    language = token.metadata.language or ""
    source_attr = f"[source,{language}]" if language else "[source]"
    return f"{source_attr}\n----\n{token.value.strip()}\n----"


def _task_marker(token: Token) -> str:
    return _TASK_MARKERS.get(token.metadata.task_type or TaskType.TODO, "* [ ] ")


def split_attribution(quote: str) -> tuple[str, str] | None:
    """Split ``quote`` into ``(text, author)`` when it ends with an attribution.

    ``"Text" - Author`` always qualifies. The unquoted ``Text - Author`` form
    qualifies only when the author part is shorter than ``MAX_AUTHOR_LENGTH``
    and shorter than the text, which still matches some hyphenated sentences.
    """

    match = _QUOTED_ATTRIBUTION_RE.fullmatch(quote)
    if match is not None:
        return match.group(1), match.group(2)

    match = _LOOSE_ATTRIBUTION_RE.fullmatch(quote)
    if match is not None:
        text = match.group(1).strip()
        author = match.group(2).strip()
        if len(author) < MAX_AUTHOR_LENGTH and len(text) > len(author):
            return text, author

    return None


def _blockquote(token: Token) -> str:
    attribution = split_attribution(token.value)
    if attribution is None:
        return f'"{token.value}"'
    text, author = attribution
    return f'\n"{text}"\n-- {author}\n'


_RENDERERS: dict[TokenKind, Callable[[Token], str]] = {
    TokenKind.TEXT: _text,
    TokenKind.BLOCK_REF: _strong,
    TokenKind.MARKDOWN_LINK: _link,
    TokenKind.NAKED_URL: lambda token: token.value,
    TokenKind.IMAGE: _image,
    TokenKind.VIDEO_EMBED: _video,
    TokenKind.TAG: _strong,
    TokenKind.HIGHLIGHT: lambda token: f"#{token.value}#",
    TokenKind.BOLD: _strong,
    TokenKind.CODE_BLOCK: _code_block,
    TokenKind.QUERY: lambda token: f"Query: {token.value}",
    TokenKind.TASK_MARKER: _task_marker,
    TokenKind.BLOCKQUOTE: _blockquote,
}


def render_token(token: Token) -> str:
    renderer = _RENDERERS.get(token.kind)
    if renderer is None:
        return token.value
    return renderer(token)


def generate(tokens: Iterable[Token]) -> str:
    """Concatenate the AsciiDoc rendering of every token."""

    return "".join(render_token(token) for token in tokens)


__all__ = ["MAX_AUTHOR_LENGTH", "generate", "render_token", "split_attribution"]
