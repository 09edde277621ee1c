"""Tests for structured logging."""

import json
import logging
from pathlib import Path

import structlog

from storylens.config.models import LoggingConfig, LogOutputConfig
from storylens.core.logging import (
    clear_request_id,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)


class TestRequestIdCorrelation:
    """Request ID context variable tests."""

    def setup_method(self) -> None:
        clear_request_id()

    def test_given_request_id_when_set_then_can_retrieve(self) -> None:
        """Request ID can be set and retrieved."""
        result = set_request_id("test-123")

        assert result == "test-123"
        assert get_request_id() == "test-123"

    def test_given_no_id_when_set_then_generates_id(self) -> None:
        """Set generates a short hex ID when none is provided."""
        rid = set_request_id()
        assert len(rid) == 12

    def test_given_set_id_when_clear_then_removes_id(self) -> None:
        set_request_id("to-clear")
        clear_request_id()
        assert get_request_id() is None


class TestConfigureLogging:
    """Handler wiring tests."""

    def teardown_method(self) -> None:
        logging.getLogger().handlers.clear()
        structlog.reset_defaults()

    def test_simple_setup_installs_one_handler(self) -> None:
        configure_logging(level="DEBUG")

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG

    def test_multi_output_levels(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "storylens.log"
        configure_logging(
            config=LoggingConfig(
                level="DEBUG",
                outputs=[
                    LogOutputConfig(destination="stderr", level="WARNING"),
                    LogOutputConfig(destination=str(log_file), format="json"),
                ],
            )
        )

        handlers = logging.getLogger().handlers
        assert [h.level for h in handlers] == [logging.WARNING, logging.DEBUG]
        assert log_file.parent.is_dir()

    def test_json_file_output_carries_event_and_request_id(self, tmp_path: Path) -> None:
        log_file = tmp_path / "out.log"
        configure_logging(
            config=LoggingConfig(
                level="INFO",
                outputs=[LogOutputConfig(destination=str(log_file), format="json")],
            )
        )
        set_request_id("req-1")
        try:
            get_logger("tests").info("context_loaded", entities=3)
        finally:
            clear_request_id()
        for handler in logging.getLogger().handlers:
            handler.flush()

        record = json.loads(log_file.read_text().strip().splitlines()[-1])
        assert record["event"] == "context_loaded"
        assert record["entities"] == 3
        assert record["request_id"] == "req-1"
        assert record["logger"] == "tests"
