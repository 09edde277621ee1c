"""storylens references command - where an entity is mentioned."""

import asyncio
import json
from pathlib import Path
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from storylens.config.loader import load_config
from storylens.core.errors import ConfigError
from storylens.mcp.context import AppContext


async def _run(app_ctx: AppContext, entity_id: str, files: list[Path]) -> list[dict[str, Any]]:
    try:
        return await app_ctx.find_references(entity_id, files)
    finally:
        app_ctx.dispose()


@click.command()
@click.argument("entity_id")
@click.option(
    "--dir",
    "directory",
    default=".",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory whose manuscripts are searched",
)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def references_command(entity_id: str, directory: Path, as_json: bool) -> None:
    """List every mention of ENTITY_ID in the manuscripts under --dir."""
    root = directory.resolve()
    try:
        config = load_config(root)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    app_ctx = AppContext.create(root, config)
    files = app_ctx.manuscript_files(root)
    references = asyncio.run(_run(app_ctx, entity_id, files))

    if as_json:
        click.echo(json.dumps(references, ensure_ascii=False, indent=2))
        return

    console = Console()
    if not references:
        console.print(f"[yellow]No references[/yellow] to '{entity_id}' in {len(files)} files")
        return

    table = Table(title=f"References to {entity_id}")
    table.add_column("File")
    table.add_column("Line", justify="right")
    table.add_column("Col", justify="right")
    table.add_column("Text")
    table.add_column("Confidence", justify="right")
    for ref in references:
        start = ref["range"]["start"]
        ref_path = Path(ref["path"])
        table.add_row(
            str(ref_path.relative_to(root)) if ref_path.is_relative_to(root) else ref["path"],
            str(start["line"] + 1),
            str(start["character"] + 1),
            ref["text"],
            f"{ref['confidence']:.0%}",
        )
    console.print(table)
