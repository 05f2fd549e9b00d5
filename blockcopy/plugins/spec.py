"""Hook specifications for blockcopy plugins."""

from __future__ import annotations

from collections.abc import Iterable

from blockcopy.config import BlockcopyConfig

from ._markers import hookspec
from .types import FormatContribution


class BlockcopyHookSpec:
    """Collection of pluggy hook specifications."""

    @hookspec
    def export_formats(self, config: BlockcopyConfig) -> Iterable[FormatContribution]:
        """Return output formats (converters) provided by the plugin."""
