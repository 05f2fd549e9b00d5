"""Render tokens as HTML fragments."""

from __future__ import annotations

from html import escape
from typing import Callable, Iterable

from blockcopy.models import TaskType, Token, TokenKind, VideoType

_TASK_EMOJI = {
    TaskType.DOING: "🔄",
    TaskType.LATER: "⏳",
    TaskType.NOW: "🔥",
}

YOUTUBE_EMBED_URL = "https://www.youtube.com/embed/{video_id}"
VIMEO_EMBED_URL = "https://player.vimeo.com/video/{video_id}"


def escape_html(text: str) -> str:
    """Escape ``& < > " '`` for use in element content and attributes."""

    return escape(text, quote=True)


def _strong(token: Token) -> str:
    return f"<strong>{escape_html(token.value)}</strong>"


def _link(token: Token) -> str:
    text = escape_html(token.metadata.link_text or token.value)
    target = escape_html(token.metadata.link_target or "")
    if token.metadata.is_external_url:
        return f'<a href="{target}">{text}</a>'
    return f"<strong>{text}</strong> <em>(→ {target})</em>"


def _naked_url(token: Token) -> str:
    url = escape_html(token.value)
    return f'<a href="{url}">{url}</a>'


def _image(token: Token) -> str:
    alt_text = token.metadata.alt_text or ""
    source = escape_html(token.metadata.link_target or "")
    if token.metadata.is_external_url:
        return f'<img src="{source}" alt="{escape_html(alt_text)}" />'
    label = escape_html(alt_text or "no description")
    return f"<strong>[Image: {label}]</strong> <em>(local file: {source})</em>"


def _video(token: Token) -> str:
    video_type = token.metadata.video_type
    video_id = token.metadata.video_id
    if video_type is VideoType.YOUTUBE and video_id:
        src = YOUTUBE_EMBED_URL.format(video_id=escape_html(video_id))
        return (
            f'<iframe width="560" height="315" src="{src}" '
            'frameborder="0" allowfullscreen></iframe>'
        )
    if video_type is VideoType.VIMEO and video_id:
        src = VIMEO_EMBED_URL.format(video_id=escape_html(video_id))
        return (
            f'<iframe src="{src}" width="560" height="315" '
            'frameborder="0" allowfullscreen></iframe>'
        )
    url = escape_html(token.metadata.link_target or token.value)
    return f'<a href="{url}">▶️ Video</a>'


def _code_block(token: Token) -> str:
    language = token.metadata.language or ""
    lang_class = f' class="language-{escape_html(language)}"' if language else ""
    return f"<pre><code{lang_class}>{escape_html(token.value)}</code></pre>"


def _task_marker(token: Token) -> str:
    checked = " checked" if token.metadata.task_type is TaskType.DONE else ""
    emoji = _TASK_EMOJI.get(token.metadata.task_type)
    checkbox = f'<input type="checkbox"{checked} disabled /> '
    return f"{checkbox}{emoji} " if emoji else checkbox


_RENDERERS: dict[TokenKind, Callable[[Token], str]] = {
    TokenKind.TEXT: lambda token: escape_html(token.value),
    TokenKind.BLOCK_REF: _strong,
    TokenKind.MARKDOWN_LINK: _link,
    TokenKind.NAKED_URL: _naked_url,
    TokenKind.IMAGE: _image,
    TokenKind.VIDEO_EMBED: _video,
    TokenKind.TAG: _strong,
    TokenKind.HIGHLIGHT: lambda token: f"<mark>{escape_html(token.value)}</mark>",
    TokenKind.BOLD: _strong,
    TokenKind.CODE_BLOCK: _code_block,
    TokenKind.QUERY: lambda token: f"<em>Query: {escape_html(token.value)}</em>",
    TokenKind.TASK_MARKER: _task_marker,
    TokenKind.BLOCKQUOTE: lambda token: (
        f"<blockquote>{escape_html(token.value)}</blockquote>"
    ),
}


def render_token(token: Token) -> str:
    renderer = _RENDERERS.get(token.kind)
    if renderer is None:
        return escape_html(token.value)
    return renderer(token)


def generate(tokens: Iterable[Token]) -> str:
    """Concatenate the HTML rendering of every token."""

    return "".join(render_token(token) for token in tokens)


__all__ = ["escape_html", "generate", "render_token"]
