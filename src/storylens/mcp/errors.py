"""Structured errors for MCP tools and resources.

Extends FastMCP's ToolError so FastMCP passes it through unchanged instead of
wrapping it in a generic error.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from fastmcp.exceptions import ToolError

from storylens.core.errors import StorylensError


class MCPErrorCode(StrEnum):
    """Machine-readable error codes for MCP tool failures."""

    INVALID_PARAMS = "INVALID_PARAMS"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    RESOURCE_ERROR = "RESOURCE_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class MCPError(ToolError):
    """Tool error carrying a code and a remediation hint."""

    def __init__(
        self,
        code: MCPErrorCode,
        message: str,
        remediation: str,
        path: str | None = None,
        **context: Any,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.remediation = remediation
        self.path = path
        self.context = context

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "remediation": self.remediation,
            "path": self.path,
            "context": self.context,
        }

    @classmethod
    def from_storylens(cls, error: StorylensError) -> MCPError:
        return cls(
            MCPErrorCode.RESOURCE_ERROR,
            error.message,
            "Use a storyteller:// URI listed by the server's resources.",
            error_code=error.code.value,
            details=error.details,
        )


class FileNotFoundToolError(MCPError):
    """Raised when a tool is pointed at a path that does not exist."""

    def __init__(self, path: str) -> None:
        super().__init__(
            code=MCPErrorCode.FILE_NOT_FOUND,
            message=f"File not found: {path}",
            remediation="Pass a path relative to the project root or an absolute path.",
            path=path,
        )


class InvalidParamsError(MCPError):
    """Raised when tool parameters are missing or contradictory."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(
            code=MCPErrorCode.INVALID_PARAMS,
            message=message,
            remediation="Check the tool's parameter descriptions and retry.",
            **context,
        )
