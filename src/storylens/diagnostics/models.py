"""Diagnostic models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from storylens.detection.models import Range


class DiagnosticSeverity(IntEnum):
    """Severity as consumers number it.

    0=info, 1=warning, 2=error. 3 marks hints (low-importance, "unused" style
    findings). Editor clients number severities differently, see ``to_lsp``.
    """

    INFO = 0
    WARNING = 1
    ERROR = 2
    HINT = 3

    def to_lsp(self) -> int:
        """LSP DiagnosticSeverity (1=Error, 2=Warning, 3=Information, 4=Hint)."""
        return _LSP_SEVERITY[self]


_LSP_SEVERITY: dict[DiagnosticSeverity, int] = {
    DiagnosticSeverity.ERROR: 1,
    DiagnosticSeverity.WARNING: 2,
    DiagnosticSeverity.INFO: 3,
    DiagnosticSeverity.HINT: 4,
}


@dataclass(frozen=True)
class Diagnostic:
    """A finding about a document range, tagged with the source that produced it."""

    range: Range
    message: str
    severity: DiagnosticSeverity = DiagnosticSeverity.WARNING
    source: str = ""
    code: str | None = None

    def with_source(self, source: str) -> Diagnostic:
        return Diagnostic(self.range, self.message, self.severity, source, self.code)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "range": self.range.to_dict(),
            "message": self.message,
            "severity": int(self.severity),
            "source": self.source,
        }
        if self.code is not None:
            data["code"] = self.code
        return data

    def to_lsp_dict(self) -> dict[str, Any]:
        data = self.to_dict()
        data["severity"] = self.severity.to_lsp()
        return data
