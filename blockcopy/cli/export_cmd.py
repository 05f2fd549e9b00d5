"""Export command for blockcopy CLI."""

from __future__ import annotations

from dataclasses import replace
from pathlib import Path

import click

from ..services.export import (
    ExportError,
    export_block,
    export_page,
    get_export_format_descriptions,
    options_from_config,
    render_standalone,
)
from ..sources import OutlineFileSource, SourceError
from ._common import BlockcopyCliError, get_app


def _echo_formats(descriptions: list[tuple[str, str]]) -> None:
    if not descriptions:
        click.echo("No export formats are available.")
        return
    click.echo("Available export formats:\n")
    for fmt, desc in descriptions:
        if desc:
            click.echo(f"  - {fmt}: {desc}")
        else:
            click.echo(f"  - {fmt}")


@click.command(name="export")
@click.argument(
    "path",
    type=click.Path(path_type=Path, dir_okay=False),
    required=False,
)
@click.option(
    "-b",
    "--block",
    "block_id",
    type=str,
    default=None,
    help="Export only this block (id or positional path such as 1.2).",
)
@click.option(
    "-f",
    "--format",
    "export_format",
    type=str,
    default=None,
    metavar="FORMAT",
    help="Export format identifier.",
)
@click.option(
    "--children/--no-children",
    "include_children",
    default=None,
    help="Include nested blocks.",
)
@click.option(
    "--properties/--no-properties",
    "include_properties",
    default=None,
    help="Include block properties.",
)
@click.option(
    "-d",
    "--max-depth",
    "max_depth",
    type=int,
    default=None,
    help="Deepest level to render, the exported block being level 0.",
)
@click.option(
    "--no-depth-limit",
    "no_depth_limit",
    is_flag=True,
    help="Render every nested level, ignoring the configured max depth.",
)
@click.option(
    "-o",
    "--output",
    "output",
    type=click.Path(path_type=Path, dir_okay=False),
    default=None,
    help="Write the result to this file instead of stdout.",
)
@click.option(
    "--standalone",
    is_flag=True,
    help="Wrap the result in a complete document.",
)
@click.option(
    "--title",
    type=str,
    default=None,
    help="Document title used with --standalone.",
)
@click.option(
    "-l",
    "--list-formats",
    "list_formats",
    is_flag=True,
    help="List available export formats and exit.",
)
@click.pass_context
def export(
    ctx: click.Context,
    path: Path | None,
    block_id: str | None,
    export_format: str | None,
    include_children: bool | None,
    include_properties: bool | None,
    max_depth: int | None,
    no_depth_limit: bool,
    output: Path | None,
    standalone: bool,
    title: str | None,
    list_formats: bool,
) -> None:
    """Export an outline file, or one block of it."""

    app = get_app(ctx)

    if list_formats:
        try:
            descriptions = get_export_format_descriptions(app.config)
        except ExportError as exc:
            raise BlockcopyCliError(str(exc)) from exc
        _echo_formats(descriptions)
        ctx.exit(0)

    if path is None:
        raise BlockcopyCliError("Missing argument 'PATH'.")

    options = options_from_config(
        app.config,
        format=export_format.lower() if export_format else None,
        include_children=include_children,
        include_properties=include_properties,
        max_depth=max_depth,
    )
    if no_depth_limit:
        if max_depth is not None:
            raise BlockcopyCliError(
                "--max-depth and --no-depth-limit cannot be combined."
            )
        options = replace(options, max_depth=None)
    source = OutlineFileSource(path)

    try:
        if block_id is not None:
            result = export_block(source, block_id, options, app.config)
        else:
            result = export_page(source, options, app.config)
        content = result.content
        if standalone:
            content = render_standalone(result, title or path.stem, app.config)
    except (ExportError, SourceError) as exc:
        raise BlockcopyCliError(str(exc)) from exc

    if output is None:
        click.echo(content, nl=not content.endswith("\n"))
        return

    if not content.endswith("\n"):
        content += "\n"
    try:
        output.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise BlockcopyCliError(f"Failed to write {output}: {exc}") from exc
    click.echo(
        f"Exported {result.block_count} block(s) as {result.format} to {output}",
        err=True,
    )


def register(cli: click.Group) -> None:
    """Register the command with the root CLI group."""

    cli.add_command(export)
