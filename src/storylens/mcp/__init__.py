"""MCP module - storyteller:// resources and diagnostics tools."""

from storylens.mcp.context import AppContext
from storylens.mcp.errors import MCPError, MCPErrorCode
from storylens.mcp.resources import ProjectResourceProvider
from storylens.mcp.uri import ParsedUri, ResourceType, SubResource, parse_resource_uri

__all__ = [
    "AppContext",
    "MCPError",
    "MCPErrorCode",
    "ParsedUri",
    "ProjectResourceProvider",
    "ResourceType",
    "SubResource",
    "parse_resource_uri",
]
