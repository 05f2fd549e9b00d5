"""Config command for blockcopy CLI."""

from __future__ import annotations

from pathlib import Path

import click

from ..config import DEFAULT_CONFIG_PATH, bootstrap_config_file
from ._common import BlockcopyCliError


@click.command(name="config")
@click.pass_context
def config(ctx: click.Context) -> None:
    """Create the default configuration file and print its location."""

    selected_path: Path | None = ctx.obj.get("config_path")
    config_path = (selected_path or DEFAULT_CONFIG_PATH).expanduser()

    try:
        created = bootstrap_config_file(config_path)
    except OSError as exc:
        raise BlockcopyCliError(
            f"Failed to create configuration at {config_path}: {exc}"
        ) from exc

    if created:
        click.echo(f"Created configuration at {config_path}")
    else:
        click.echo(f"Configuration already exists at {config_path}")


def register(cli: click.Group) -> None:
    """Register the command with the root CLI group."""

    cli.add_command(config)
