"""storylens mcp command - serve resources and tools over stdio."""

from pathlib import Path

import click


@click.command()
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=False, path_type=Path))
def mcp_command(path: Path) -> None:
    """Run the MCP server for the project at PATH (default: current directory)."""
    from storylens.mcp.server import run_server

    run_server(path.resolve())
