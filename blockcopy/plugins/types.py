"""Type definitions for blockcopy plugin contracts."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:  # pragma: no cover - type check only
    from ..models import Block, ExportOptions, ExportResult


class Converter(Protocol):
    """Callable turning one block tree into a document of a given format."""

    def __call__(
        self,
        block: "Block",
        options: "ExportOptions",
    ) -> "ExportResult":  # pragma: no cover - Protocol
        """Convert ``block`` and return the rendered result."""


class DocumentRenderer(Protocol):
    """Callable wrapping converted content into a standalone document."""

    def __call__(self, content: str, *, title: str) -> str:  # pragma: no cover
        """Return ``content`` embedded in a complete document."""


@dataclass(slots=True, frozen=True)
class FormatContribution:
    """Descriptor describing an output format provided by a plugin."""

    format_id: str
    converter: Converter
    description: str
    document_renderer: DocumentRenderer | None = None


__all__ = ["Converter", "DocumentRenderer", "FormatContribution"]
