"""Lint module - external text linter worker and diagnostic source."""

from storylens.lint.config import detect_linter_config
from storylens.lint.models import TRANSITIONS, LinterMessage, LinterResult, WorkerState
from storylens.lint.parser import parse_linter_output
from storylens.lint.source import LinterDiagnosticSource, message_to_diagnostic
from storylens.lint.worker import LinterWorker, run_linter_process

__all__ = [
    "LinterDiagnosticSource",
    "LinterMessage",
    "LinterResult",
    "LinterWorker",
    "TRANSITIONS",
    "WorkerState",
    "detect_linter_config",
    "message_to_diagnostic",
    "parse_linter_output",
    "run_linter_process",
]
