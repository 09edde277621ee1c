"""Core module exports."""

from storylens.core.errors import (
    ConfigError,
    ErrorCode,
    InternalError,
    ResourceUriError,
    StorylensError,
)
from storylens.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)

__all__ = [
    # Errors
    "ConfigError",
    "ErrorCode",
    "InternalError",
    "ResourceUriError",
    "StorylensError",
    # Logging
    "clear_request_id",
    "configure_logging",
    "get_logger",
    "get_request_id",
    "set_request_id",
]
