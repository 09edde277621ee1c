"""FastMCP server creation and wiring."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

import structlog
from fastmcp import FastMCP
from fastmcp.exceptions import ResourceError
from pydantic import Field

from storylens.config.constants import RESOURCE_SCHEME
from storylens.core.errors import ResourceUriError
from storylens.core.logging import clear_request_id, set_request_id
from storylens.diagnostics.models import DiagnosticSeverity
from storylens.mcp.context import AppContext
from storylens.mcp.errors import FileNotFoundToolError, InvalidParamsError

log = structlog.get_logger(__name__)

_STATIC_RESOURCES = ("project", "characters", "settings", "timelines", "foreshadowings", "chapters")
_ENTITY_RESOURCES = ("character", "setting", "timeline", "foreshadowing")


async def _read(app_ctx: AppContext, uri: str) -> str:
    try:
        return await app_ctx.resources.read_resource(uri)
    except ResourceUriError as e:
        raise ResourceError(str(e)) from e


def _static_reader(app_ctx: AppContext, uri: str) -> Callable[[], Awaitable[str]]:
    async def read() -> str:
        return await _read(app_ctx, uri)

    return read


def _entity_reader(app_ctx: AppContext, resource_type: str) -> Callable[[str], Awaitable[str]]:
    async def read(entity_id: str) -> str:
        return await _read(app_ctx, f"{RESOURCE_SCHEME}://{resource_type}/{entity_id}")

    return read


def register_resources(mcp: FastMCP, app_ctx: AppContext) -> None:
    """Register storyteller:// resources and templates."""
    base = f"{RESOURCE_SCHEME}://"
    for name in _STATIC_RESOURCES:
        mcp.resource(f"{base}{name}", name=name, mime_type="application/json")(
            _static_reader(app_ctx, f"{base}{name}")
        )
    for name in (*_ENTITY_RESOURCES, "manuscript"):
        mcp.resource(f"{base}{name}/{{entity_id}}", name=name, mime_type="application/json")(
            _entity_reader(app_ctx, name)
        )

    @mcp.resource(f"{base}character/{{entity_id}}/phases", mime_type="application/json")
    async def character_phases(entity_id: str) -> str:
        return await _read(app_ctx, f"{base}character/{entity_id}/phases")

    @mcp.resource(f"{base}character/{{entity_id}}/phase/{{phase_id}}", mime_type="application/json")
    async def character_phase(entity_id: str, phase_id: str) -> str:
        return await _read(app_ctx, f"{base}character/{entity_id}/phase/{phase_id}")

    @mcp.resource(
        f"{base}character/{{entity_id}}/snapshot/{{phase_id}}", mime_type="application/json"
    )
    async def character_snapshot(entity_id: str, phase_id: str) -> str:
        return await _read(app_ctx, f"{base}character/{entity_id}/snapshot/{phase_id}")


@contextmanager
def _tool_call(tool: str) -> Iterator[None]:
    """Tag log records emitted while a tool runs with a fresh request id."""
    request_id = set_request_id()
    log.debug("tool_call_started", tool=tool, request_id=request_id)
    try:
        yield
    finally:
        clear_request_id()


def _summarize(diagnostics: list[dict[str, Any]]) -> str:
    if not diagnostics:
        return "clean"
    errors = sum(1 for d in diagnostics if d["severity"] == DiagnosticSeverity.ERROR)
    warnings = sum(1 for d in diagnostics if d["severity"] == DiagnosticSeverity.WARNING)
    return f"{len(diagnostics)} diagnostics ({errors} errors, {warnings} warnings)"


def register_tools(mcp: FastMCP, app_ctx: AppContext) -> None:
    """Register diagnostics and reference tools."""

    @mcp.tool
    async def lsp_validate(
        path: str = Field(..., description="Manuscript or definition file to check"),
    ) -> dict[str, Any]:
        """Run entity rules and the text linter over a file and return merged diagnostics."""
        target = app_ctx.resolve_path(path)
        if not target.is_file():
            raise FileNotFoundToolError(path)
        with _tool_call("lsp_validate"):
            diagnostics = [d.to_dict() for d in await app_ctx.validate_file(target)]
        return {"path": str(target), "diagnostics": diagnostics, "summary": _summarize(diagnostics)}

    @mcp.tool
    async def lsp_find_references(
        entity_id: str = Field(..., description="Entity id to search for"),
        path: str | None = Field(None, description="Single file to search"),
        directory: str | None = Field(
            None, description="Directory whose manuscripts are searched"
        ),
    ) -> dict[str, Any]:
        """Find positioned references to an entity in a file or a directory of manuscripts."""
        if (path is None) == (directory is None):
            raise InvalidParamsError(
                "Pass exactly one of 'path' or 'directory'", path=path, directory=directory
            )

        if path is not None:
            target = app_ctx.resolve_path(path)
            if not target.is_file():
                raise FileNotFoundToolError(path)
            files = [target]
        else:
            search_dir = app_ctx.resolve_path(directory or "")
            if not search_dir.is_dir():
                raise FileNotFoundToolError(directory or "")
            files = app_ctx.manuscript_files(search_dir)

        with _tool_call("lsp_find_references"):
            references = await app_ctx.find_references(entity_id, files)
        return {
            "entity_id": entity_id,
            "references": references,
            "total": len(references),
            "files_searched": len(files),
        }


def create_mcp_server(app_ctx: AppContext) -> FastMCP:
    """Create FastMCP server with resources and tools wired to context."""
    mcp = FastMCP("storylens")
    register_resources(mcp, app_ctx)
    register_tools(mcp, app_ctx)
    return mcp


def run_server(project_root: Path) -> None:
    """Create and run the MCP server over stdio."""
    from storylens.config.loader import load_config
    from storylens.core.logging import configure_logging

    config = load_config(project_root)
    # stdout carries the protocol; logs go to stderr
    outputs = [
        o.model_copy(update={"destination": "stderr"}) if o.destination == "stdout" else o
        for o in config.logging.outputs
    ]
    configure_logging(config=config.logging.model_copy(update={"outputs": outputs}))

    log.info("mcp_server_starting", project_root=str(project_root))
    app_ctx = AppContext.create(project_root, config)
    mcp = create_mcp_server(app_ctx)
    try:
        mcp.run()
    finally:
        app_ctx.dispose()
