"""Shared helpers for blockcopy CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import click

from ..app import AppContext, bootstrap
from ..config import ConfigError, MissingConfigError

CONTEXT_SETTINGS: dict[str, Any] = {"help_option_names": ["-h", "--help"]}


class BlockcopyCliError(click.ClickException):
    """Shared Click exception wrapper for CLI failures."""


def get_app(ctx: click.Context) -> AppContext:
    """Return a cached AppContext for the current CLI invocation."""

    app: AppContext | None = ctx.obj.get("app")
    if app is not None:
        return app

    config_path_opt: Path | None = ctx.obj.get("config_path")
    verbose: bool = ctx.obj.get("verbose", False)

    try:
        app = bootstrap(config_path_opt, verbose=verbose)
    except MissingConfigError as exc:
        raise BlockcopyCliError(
            f"{exc}. Run 'blockcopy config' to create a default one."
        ) from exc
    except ConfigError as exc:
        raise BlockcopyCliError(str(exc)) from exc

    ctx.obj["app"] = app
    return app
