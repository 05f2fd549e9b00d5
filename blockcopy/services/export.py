"""Export services for blockcopy."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import TYPE_CHECKING

from ..config import DEFAULT_FORMAT, DEFAULT_MAX_DEPTH, BlockcopyConfig
from ..errors import ExportError
from ..models import Block, ExportOptions, ExportResult
from ..plugins import (
    FormatContribution,
    PluginRegistrationError,
    load_format_contributions,
    reset_plugin_manager_cache,
)

if TYPE_CHECKING:
    from ..sources import BlockSource

PAGE_SEPARATOR = "\n\n"

logger = logging.getLogger(__name__)


def clear_export_registry_cache() -> None:
    """Reset cached format discovery (primarily for testing)."""

    reset_plugin_manager_cache()


def _load_export_registry(
    config: BlockcopyConfig | None,
) -> dict[str, FormatContribution]:
    try:
        return load_format_contributions(config or BlockcopyConfig())
    except PluginRegistrationError as exc:
        raise ExportError(str(exc)) from exc


def _resolve_contribution(
    export_format: str,
    config: BlockcopyConfig | None,
) -> FormatContribution:
    formats = _load_export_registry(config)
    contribution = formats.get(export_format.lower())
    if contribution is None:
        available = ", ".join(sorted(formats))
        if available:
            raise ExportError(
                f"Unknown export format: {export_format}. Available: {available}."
            )
        raise ExportError("No export plugins are available.")
    return contribution


def get_export_format_choices(config: BlockcopyConfig | None = None) -> list[str]:
    """Return the list of available export format identifiers."""

    registry = _load_export_registry(config)
    return sorted(registry.keys())


def get_export_format_descriptions(
    config: BlockcopyConfig | None = None,
) -> list[tuple[str, str]]:
    """Return tuples of ``(format_id, description)`` for available formats."""

    registry = _load_export_registry(config)
    return sorted(
        ((fmt, contrib.description) for fmt, contrib in registry.items()),
        key=lambda item: item[0],
    )


def default_export_options() -> ExportOptions:
    """Options used when neither the caller nor a config file says otherwise."""

    return ExportOptions(
        format=DEFAULT_FORMAT,
        include_children=True,
        include_properties=False,
        max_depth=DEFAULT_MAX_DEPTH,
    )


def options_from_config(config: BlockcopyConfig, **overrides: object) -> ExportOptions:
    """Build export options from configured defaults.

    Keyword arguments whose value is ``None`` leave the configured value in
    place.
    """

    options = ExportOptions(
        format=config.format,
        include_children=config.include_children,
        include_properties=config.include_properties,
        max_depth=config.max_depth,
    )
    changes = {key: value for key, value in overrides.items() if value is not None}
    if changes:
        options = replace(options, **changes)
    return options


def convert_block(
    block: Block,
    options: ExportOptions,
    config: BlockcopyConfig | None = None,
) -> ExportResult:
    """Convert an already fetched block tree with the selected format."""

    contribution = _resolve_contribution(options.format, config)
    logger.debug("Converting block %s as %s", block.id, contribution.format_id)

    try:
        result = contribution.converter(block, options)
    except ExportError:
        raise
    except Exception as exc:
        raise ExportError(
            f"Exporter '{contribution.format_id}' raised an unexpected error: {exc}"
        ) from exc

    logger.debug(
        "Converted %d block(s) into %d character(s)",
        result.block_count,
        len(result.content),
    )
    return result


def _fetch_depth(options: ExportOptions) -> int | None:
    if not options.include_children:
        return 0
    return options.max_depth


def export_block(
    source: "BlockSource",
    block_id: str,
    options: ExportOptions,
    config: BlockcopyConfig | None = None,
) -> ExportResult:
    """Fetch ``block_id`` with its descendants and convert it.

    Raises
    ------
    ExportError
        If the block does not exist or the source cannot be read.
    """

    # resolve the format first so a typo fails before touching the source
    _resolve_contribution(options.format, config)

    depth = _fetch_depth(options)
    logger.debug("Fetching block %s (max depth %s)", block_id, depth)
    try:
        block = source.get_block_with_children(block_id, depth)
    except ExportError:
        raise
    except Exception as exc:
        raise ExportError(f"Failed to fetch block {block_id}: {exc}") from exc

    if block is None:
        raise ExportError(f"Block with id {block_id} not found")

    return convert_block(block, options, config)


def export_page(
    source: "BlockSource",
    options: ExportOptions,
    config: BlockcopyConfig | None = None,
) -> ExportResult:
    """Convert every top-level block of a page into one document."""

    _resolve_contribution(options.format, config)

    try:
        blocks = source.get_page_blocks()
    except ExportError:
        raise
    except Exception as exc:
        raise ExportError(f"Failed to read page blocks: {exc}") from exc

    if not blocks:
        raise ExportError("Page has no blocks to export")

    results = [convert_block(block, options, config) for block in blocks]
    return ExportResult(
        content=PAGE_SEPARATOR.join(result.content for result in results),
        format=results[0].format,
        block_count=sum(result.block_count for result in results),
    )


def render_standalone(
    result: ExportResult,
    title: str,
    config: BlockcopyConfig | None = None,
) -> str:
    """Wrap converted content in a complete document of the same format."""

    contribution = _resolve_contribution(result.format, config)
    renderer = contribution.document_renderer
    if renderer is None:
        raise ExportError(
            f"Format '{contribution.format_id}' cannot produce standalone documents."
        )

    try:
        return renderer(result.content, title=title)
    except ExportError:
        raise
    except Exception as exc:
        raise ExportError(
            f"Exporter '{contribution.format_id}' raised an unexpected error: {exc}"
        ) from exc


__all__ = [
    "ExportError",
    "PAGE_SEPARATOR",
    "clear_export_registry_cache",
    "convert_block",
    "default_export_options",
    "export_block",
    "export_page",
    "get_export_format_choices",
    "get_export_format_descriptions",
    "options_from_config",
    "render_standalone",
]
