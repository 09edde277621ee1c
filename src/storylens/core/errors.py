"""Storylens error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Resource addressing
- 9xxx: Internal

Only protocol-level misuse and configuration mistakes are raised. Missing
markers, missing projects, and linter failures resolve to fallback values.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002

    # Resource addressing (3xxx)
    RESOURCE_INVALID_URI = 3001
    RESOURCE_UNSUPPORTED_SCHEME = 3002
    RESOURCE_UNSUPPORTED_TYPE = 3003
    RESOURCE_NOT_FOUND = 3004

    # Internal (9xxx)
    INTERNAL_ERROR = 9001


@dataclass(frozen=True, slots=True)
class StorylensError(Exception):
    """Base error with structured context for MCP responses."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON/MCP responses."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(StorylensError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )


class ResourceUriError(StorylensError):
    """Malformed or unsupported resource URI passed by a consumer."""

    @classmethod
    def invalid_uri(cls, uri: str) -> "ResourceUriError":
        return cls(
            code=ErrorCode.RESOURCE_INVALID_URI,
            message=f"Invalid resource URI: {uri}",
            details={"uri": uri},
        )

    @classmethod
    def unsupported_scheme(cls, uri: str, scheme: str) -> "ResourceUriError":
        return cls(
            code=ErrorCode.RESOURCE_UNSUPPORTED_SCHEME,
            message=f"Unsupported resource URI scheme: {scheme}",
            details={"uri": uri, "scheme": scheme},
        )

    @classmethod
    def unsupported_type(cls, uri: str, resource_type: str) -> "ResourceUriError":
        return cls(
            code=ErrorCode.RESOURCE_UNSUPPORTED_TYPE,
            message=f"Unsupported resource type: {resource_type}",
            details={"uri": uri, "type": resource_type},
        )

    @classmethod
    def not_found(cls, uri: str) -> "ResourceUriError":
        return cls(
            code=ErrorCode.RESOURCE_NOT_FOUND,
            message=f"Resource not found: {uri}",
            details={"uri": uri},
        )


class InternalError(StorylensError):
    """Internal/unexpected errors."""

    @classmethod
    def unexpected(cls, reason: str, **details: Any) -> "InternalError":
        return cls(
            code=ErrorCode.INTERNAL_ERROR,
            message=f"Internal error: {reason}",
            details=details,
        )
