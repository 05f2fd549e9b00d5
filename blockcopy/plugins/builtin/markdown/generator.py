"""Render tokens as GitHub-flavoured Markdown."""

from __future__ import annotations

from typing import Callable, Iterable

from blockcopy.models import TaskType, Token, TokenKind, VideoType

_TASK_MARKERS = {
    TaskType.TODO: "- [ ] ",
    TaskType.DONE: "- [x] ",
    TaskType.DOING: "- [ ] 🔄 ",
    TaskType.LATER: "- [ ] ⏳ ",
    TaskType.NOW: "- [ ] 🔥 ",
}


def _strong(token: Token) -> str:
    return f"**{token.value}**"


def _link(token: Token) -> str:
    text = token.metadata.link_text or token.value
    target = token.metadata.link_target or ""
    if token.metadata.is_external_url:
        return f"[{text}]({target})"
    # references into the outline are meaningless outside of it
    return f"**{text}** (→ {target})"


def _image(token: Token) -> str:
    alt_text = token.metadata.alt_text or ""
    source = token.metadata.link_target or ""
    if token.metadata.is_external_url:
        return f"![{alt_text}]({source})"
    return f"**[Image: {alt_text or 'no description'}]** (local file: {source})"


def _video(token: Token) -> str:
    video_type = token.metadata.video_type
    video_id = token.metadata.video_id
    if video_type is VideoType.YOUTUBE and video_id:
        return f"[▶️ YouTube Video](https://www.youtube.com/watch?v={video_id})"
    if video_type is VideoType.VIMEO and video_id:
        return f"[▶️ Vimeo Video](https://vimeo.com/{video_id})"
    url = token.metadata.link_target or token.value
    return f"[▶️ Video]({url})"


def _code_block(token: Token) -> str:
    language = token.metadata.language or ""
    return f"```{language}\n{token.value}```"


def _task_marker(token: Token) -> str:
    return _TASK_MARKERS.get(token.metadata.task_type or TaskType.TODO, "- [ ] ")


_RENDERERS: dict[TokenKind, Callable[[Token], str]] = {
    TokenKind.TEXT: lambda token: token.value,
    TokenKind.BLOCK_REF: _strong,
    TokenKind.MARKDOWN_LINK: _link,
    TokenKind.NAKED_URL: lambda token: token.value,
    TokenKind.IMAGE: _image,
    TokenKind.VIDEO_EMBED: _video,
    TokenKind.TAG: _strong,
    TokenKind.HIGHLIGHT: lambda token: f"<mark>{token.value}</mark>",
    TokenKind.BOLD: _strong,
    TokenKind.CODE_BLOCK: _code_block,
    TokenKind.QUERY: lambda token: f"Query: {token.value}",
    TokenKind.TASK_MARKER: _task_marker,
    TokenKind.BLOCKQUOTE: lambda token: f"> {token.value}",
}


def render_token(token: Token) -> str:
    renderer = _RENDERERS.get(token.kind)
    if renderer is None:
        return token.value
    return renderer(token)


def generate(tokens: Iterable[Token]) -> str:
    """Concatenate the Markdown rendering of every token."""

    return "".join(render_token(token) for token in tokens)


__all__ = ["generate", "render_token"]
