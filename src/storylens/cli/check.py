"""storylens check command - diagnostics for one file."""

import asyncio
import json
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from storylens.config.loader import load_config
from storylens.core.errors import ConfigError
from storylens.diagnostics.models import Diagnostic, DiagnosticSeverity
from storylens.mcp.context import AppContext
from storylens.project.detector import ProjectDetector

_SEVERITY_STYLE: dict[DiagnosticSeverity, str] = {
    DiagnosticSeverity.ERROR: "red",
    DiagnosticSeverity.WARNING: "yellow",
    DiagnosticSeverity.INFO: "cyan",
    DiagnosticSeverity.HINT: "dim",
}


def _diagnostics_table(path: Path, diagnostics: list[Diagnostic]) -> Table:
    table = Table(title=str(path), show_lines=False)
    table.add_column("Line", justify="right")
    table.add_column("Col", justify="right")
    table.add_column("Severity")
    table.add_column("Source")
    table.add_column("Code")
    table.add_column("Message")
    for d in diagnostics:
        style = _SEVERITY_STYLE[d.severity]
        table.add_row(
            str(d.range.start.line + 1),
            str(d.range.start.character + 1),
            f"[{style}]{d.severity.name.lower()}[/{style}]",
            d.source,
            d.code or "",
            d.message,
        )
    return table


async def _run(app_ctx: AppContext, path: Path) -> list[Diagnostic]:
    try:
        return await app_ctx.validate_file(path)
    finally:
        app_ctx.dispose()


@click.command()
@click.argument("file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.option("--no-lint", is_flag=True, help="Skip the external text linter")
def check_command(file: Path, as_json: bool, no_lint: bool) -> None:
    """Report entity and linter diagnostics for FILE.

    Exits with status 1 when any error-level diagnostic is found.
    """
    path = file.resolve()
    project_root = asyncio.run(ProjectDetector(path.parent).detect_project_root(path.as_uri()))
    try:
        overrides = {"linter": {"enabled": False}} if no_lint else {}
        config = load_config(project_root, **overrides)
    except ConfigError as e:
        raise click.ClickException(str(e)) from e

    app_ctx = AppContext.create(project_root, config)
    diagnostics = asyncio.run(_run(app_ctx, path))

    if as_json:
        click.echo(json.dumps([d.to_dict() for d in diagnostics], ensure_ascii=False, indent=2))
    else:
        console = Console()
        if diagnostics:
            console.print(_diagnostics_table(path, diagnostics))
        else:
            console.print(f"[green]✓[/green] {path}: no diagnostics")

    if any(d.severity == DiagnosticSeverity.ERROR for d in diagnostics):
        raise SystemExit(1)
