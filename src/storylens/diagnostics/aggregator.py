"""Diagnostic source aggregation.

Runs every available source over a document concurrently and concatenates
their output in source order. A source that raises contributes nothing for
that run; siblings are unaffected.
"""

from __future__ import annotations

import asyncio
from collections.abc import Iterable
from pathlib import Path

import structlog

from storylens.diagnostics.models import Diagnostic
from storylens.diagnostics.source import DiagnosticSource

logger = structlog.get_logger()


class DiagnosticAggregator:
    """Ordered collection of diagnostic sources."""

    def __init__(self, sources: Iterable[DiagnosticSource] = ()) -> None:
        self._sources: list[DiagnosticSource] = []
        for source in sources:
            self.add_source(source)

    @property
    def sources(self) -> tuple[DiagnosticSource, ...]:
        return tuple(self._sources)

    def add_source(self, source: DiagnosticSource) -> None:
        """Append a source; a source with the same name is replaced in place."""
        for i, existing in enumerate(self._sources):
            if existing.name == source.name:
                self._sources[i] = source
                return
        self._sources.append(source)

    def remove_source(self, name: str) -> bool:
        for i, existing in enumerate(self._sources):
            if existing.name == name:
                del self._sources[i]
                return True
        return False

    async def generate(self, uri: str, content: str, project_root: Path) -> list[Diagnostic]:
        sources = list(self._sources)
        if not sources:
            return []

        availability = await asyncio.gather(
            *(source.is_available() for source in sources), return_exceptions=True
        )
        active: list[DiagnosticSource] = []
        for source, available in zip(sources, availability, strict=True):
            if isinstance(available, BaseException):
                logger.warning(
                    "diagnostic_source_probe_failed", source=source.name, error=str(available)
                )
            elif available:
                active.append(source)
            else:
                logger.debug("diagnostic_source_unavailable", source=source.name)

        results = await asyncio.gather(
            *(source.generate(uri, content, project_root) for source in active),
            return_exceptions=True,
        )

        merged: list[Diagnostic] = []
        for source, result in zip(active, results, strict=True):
            if isinstance(result, BaseException):
                logger.warning(
                    "diagnostic_source_failed",
                    source=source.name,
                    uri=uri,
                    error=str(result),
                    error_type=type(result).__name__,
                )
                continue
            merged.extend(d if d.source else d.with_source(source.name) for d in result)
        return merged

    def cancel_all(self) -> None:
        for source in self._sources:
            source.cancel()

    def dispose(self) -> None:
        for source in self._sources:
            source.dispose()
        self._sources.clear()
