"""Config module exports."""

from storylens.config.loader import load_config
from storylens.config.models import (
    DiagnosticsConfig,
    LinterConfig,
    LoggingConfig,
    StorylensConfig,
)

__all__ = [
    "load_config",
    "DiagnosticsConfig",
    "LinterConfig",
    "LoggingConfig",
    "StorylensConfig",
]
