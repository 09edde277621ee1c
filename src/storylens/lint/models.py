"""Linter models - messages, results, worker states."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class LinterMessage:
    """A single finding reported by the external linter (1-based line/column)."""

    rule_id: str
    severity: int  # 0=info, 1=warning, 2=error
    line: int
    column: int
    message: str
    index: int = 0
    fix: dict[str, Any] | None = None


@dataclass(frozen=True)
class LinterResult:
    """Linter output for one file.

    An empty result is a valid terminal state: linter unavailable, timed out,
    or nothing found. A canceled request resolves to ``file_path == ""``.
    """

    file_path: str
    messages: tuple[LinterMessage, ...] = field(default_factory=tuple)

    @classmethod
    def empty(cls, file_path: str = "") -> LinterResult:
        return cls(file_path=file_path)

    @property
    def is_canceled(self) -> bool:
        return self.file_path == "" and not self.messages


class WorkerState(Enum):
    """Linter worker lifecycle."""

    IDLE = "idle"
    DEBOUNCING = "debouncing"
    RUNNING = "running"
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    CANCELED = "canceled"
    DISPOSED = "disposed"


TRANSITIONS: dict[WorkerState, frozenset[WorkerState]] = {
    WorkerState.IDLE: frozenset({WorkerState.DEBOUNCING, WorkerState.DISPOSED}),
    WorkerState.DEBOUNCING: frozenset(
        {WorkerState.RUNNING, WorkerState.CANCELED, WorkerState.DISPOSED}
    ),
    WorkerState.RUNNING: frozenset(
        {
            WorkerState.COMPLETED,
            WorkerState.TIMED_OUT,
            WorkerState.CANCELED,
            WorkerState.DISPOSED,
        }
    ),
    WorkerState.COMPLETED: frozenset({WorkerState.IDLE, WorkerState.DISPOSED}),
    WorkerState.TIMED_OUT: frozenset({WorkerState.IDLE, WorkerState.DISPOSED}),
    WorkerState.CANCELED: frozenset({WorkerState.IDLE, WorkerState.DISPOSED}),
    WorkerState.DISPOSED: frozenset(),
}
"""Allowed worker state transitions."""
