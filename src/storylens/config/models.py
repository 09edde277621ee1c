"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (STORYLENS__SECTION__KEY)
3. Project YAML (.storylens/config.yaml)
4. Global YAML (~/.config/storylens/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    STORYLENS__<SECTION>__<KEY>=<VALUE>

Examples:
    STORYLENS__LOGGING__LEVEL=DEBUG
    STORYLENS__LINTER__DEBOUNCE_SEC=0.2
    STORYLENS__DIAGNOSTICS__HINT_THRESHOLD=0.95
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from storylens.config.constants import MARKER_FILE, MAX_SEARCH_DEPTH

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        STORYLENS__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="INFO",
        description="Root log level. DEBUG logs every detection pass.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class LinterConfig(BaseModel):
    """External text linter configuration.

    Env vars:
        STORYLENS__LINTER__ENABLED: Turn the linter source on or off
        STORYLENS__LINTER__DEBOUNCE_SEC: Quiet period before a lint run starts
        STORYLENS__LINTER__TIMEOUT_SEC: Hard upper bound on waiting for the process
    """

    enabled: bool = Field(default=True, description="Run the external linter at all.")
    executable: str = Field(
        default="npx",
        description="Launcher used to invoke the linter.",
    )
    command: list[str] = Field(
        default_factory=lambda: ["textlint"],
        description="Arguments placed between the launcher and the linter flags.",
    )
    debounce_sec: float = Field(
        default=0.5,
        description="Debounce window. Keystrokes inside the window restart it.",
    )
    timeout_sec: float = Field(
        default=30.0,
        description="Give up waiting for the linter after this long.",
    )
    config_path: str | None = Field(
        default=None,
        description="Explicit linter rc file. Auto-detected in the project root when unset.",
    )

    @field_validator("debounce_sec")
    @classmethod
    def validate_debounce(cls, v: float) -> float:
        if v < 0:
            raise ValueError(f"debounce_sec must be >= 0, got {v}")
        return v

    @field_validator("timeout_sec")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"timeout_sec must be > 0, got {v}")
        return v


class DiagnosticsConfig(BaseModel):
    """Entity diagnostics configuration.

    Env vars:
        STORYLENS__DIAGNOSTICS__HINT_THRESHOLD: Confidence below which a hint is raised
        STORYLENS__DIAGNOSTICS__WARNING_THRESHOLD: Confidence below which a warning is raised
    """

    hint_threshold: float = Field(default=0.9, ge=0.0, le=1.0)
    warning_threshold: float = Field(default=0.7, ge=0.0, le=1.0)
    publish_debounce_sec: float = Field(default=0.0, ge=0.0)
    check_frontmatter_references: bool = Field(
        default=True,
        description="Warn about frontmatter ids that match no known entity.",
    )

    @model_validator(mode="after")
    def validate_thresholds(self) -> "DiagnosticsConfig":
        if self.warning_threshold > self.hint_threshold:
            raise ValueError("warning_threshold must not exceed hint_threshold")
        return self


class StorylensConfig(BaseModel):
    """Root configuration."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    linter: LinterConfig = Field(default_factory=LinterConfig)
    diagnostics: DiagnosticsConfig = Field(default_factory=DiagnosticsConfig)
    marker_file: str = MARKER_FILE
    max_search_depth: int = Field(default=MAX_SEARCH_DEPTH, ge=1)
