"""Diagnostic source interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from storylens.diagnostics.models import Diagnostic


class DiagnosticSource(ABC):
    """A pluggable producer of diagnostics.

    Aggregators treat every source the same way: check ``is_available``, then
    ``generate``. ``cancel`` and ``dispose`` default to no-ops for sources that
    hold no background work.
    """

    name: str

    @abstractmethod
    async def is_available(self) -> bool:
        """Whether the source can run in the current environment."""

    @abstractmethod
    async def generate(self, uri: str, content: str, project_root: Path) -> list[Diagnostic]:
        """Diagnostics for one document."""

    def cancel(self) -> None:  # noqa: B027
        """Abandon any in-progress generation."""

    def dispose(self) -> None:  # noqa: B027
        """Release held resources. Safe to call more than once."""
