"""Storylens CLI - storylens command."""

import click

from storylens.cli.check import check_command
from storylens.cli.mcp import mcp_command
from storylens.cli.references import references_command
from storylens.core.logging import configure_logging


@click.group()
@click.version_option(version="0.1.0", prog_name="storylens")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """Storylens - entity detection and diagnostics for manuscripts."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    configure_logging(level="DEBUG" if verbose else "WARNING")


cli.add_command(check_command, name="check")
cli.add_command(references_command, name="references")
cli.add_command(mcp_command, name="mcp")


if __name__ == "__main__":
    cli()
