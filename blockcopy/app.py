"""Application bootstrap and context container for blockcopy."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from pathlib import Path

from .config import BlockcopyConfig, load_config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AppContext:
    """Aggregates the loaded configuration for the CLI lifecycle."""

    config: BlockcopyConfig


def configure_logging(level: str | int) -> None:
    """Send log records to stderr at ``level``.

    Output goes to stderr so that exported documents written to stdout stay
    clean.
    """

    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
        force=True,
    )


def bootstrap(config_path: Path | None, *, verbose: bool = False) -> AppContext:
    """Load configuration and set up logging."""

    # Defer error mapping to the CLI, which knows how to present messages.
    config = load_config(config_path)
    configure_logging(logging.DEBUG if verbose else config.log_level)
    logger.debug("Using configuration from %s", config.source_path or "defaults")
    return AppContext(config=config)
