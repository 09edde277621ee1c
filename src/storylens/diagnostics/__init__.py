"""Diagnostics module - entity rules, source aggregation, publishing."""

from storylens.diagnostics.aggregator import DiagnosticAggregator
from storylens.diagnostics.generator import DiagnosticsGenerator, EntityDiagnosticSource
from storylens.diagnostics.models import Diagnostic, DiagnosticSeverity
from storylens.diagnostics.publisher import DiagnosticsPublisher
from storylens.diagnostics.source import DiagnosticSource

__all__ = [
    "Diagnostic",
    "DiagnosticAggregator",
    "DiagnosticSeverity",
    "DiagnosticSource",
    "DiagnosticsGenerator",
    "DiagnosticsPublisher",
    "EntityDiagnosticSource",
]
