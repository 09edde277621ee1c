"""Application context shared by MCP handlers and the CLI.

Single object wiring project detection, per-project entity contexts, and
per-project diagnostic aggregation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from storylens.config.models import StorylensConfig
from storylens.diagnostics.aggregator import DiagnosticAggregator
from storylens.diagnostics.generator import DiagnosticsGenerator, EntityDiagnosticSource
from storylens.diagnostics.models import Diagnostic
from storylens.diagnostics.source import DiagnosticSource
from storylens.entities.loader import EntityLoader, FileEntityLoader
from storylens.lint.source import LinterDiagnosticSource
from storylens.mcp.resources import ProjectResourceProvider
from storylens.project.context import ProjectContextManager
from storylens.project.detector import ProjectDetector

logger = structlog.get_logger()

MANUSCRIPT_SUFFIXES = frozenset({".md", ".markdown"})


@dataclass
class AppContext:
    """Context object passed to all MCP tool handlers and CLI commands."""

    project_root: Path
    config: StorylensConfig
    loader: EntityLoader
    detector: ProjectDetector
    contexts: ProjectContextManager
    resources: ProjectResourceProvider
    _aggregators: dict[Path, DiagnosticAggregator] = field(default_factory=dict, init=False)

    @classmethod
    def create(
        cls,
        project_root: Path,
        config: StorylensConfig | None = None,
        loader: EntityLoader | None = None,
    ) -> AppContext:
        config = config or StorylensConfig()
        loader = loader or FileEntityLoader()
        root = project_root.absolute()
        contexts = ProjectContextManager(loader)
        return cls(
            project_root=root,
            config=config,
            loader=loader,
            detector=ProjectDetector(
                root, marker_file=config.marker_file, max_depth=config.max_search_depth
            ),
            contexts=contexts,
            resources=ProjectResourceProvider(root, contexts, loader),
        )

    def resolve_path(self, path: str) -> Path:
        candidate = Path(path).expanduser()
        if not candidate.is_absolute():
            candidate = self.project_root / candidate
        return candidate

    def aggregator_for(self, project_root: Path) -> DiagnosticAggregator:
        """Per-project aggregator: entity rules first, then the linter."""
        aggregator = self._aggregators.get(project_root)
        if aggregator is None:
            sources: list[DiagnosticSource] = [
                EntityDiagnosticSource(self.contexts, DiagnosticsGenerator(self.config.diagnostics))
            ]
            if self.config.linter.enabled:
                sources.append(LinterDiagnosticSource(project_root, self.config.linter))
            aggregator = DiagnosticAggregator(sources)
            self._aggregators[project_root] = aggregator
        return aggregator

    async def validate_file(self, path: Path) -> list[Diagnostic]:
        """Merged diagnostics for one file on disk."""
        try:
            content = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            logger.warning("validate_file_undecodable", path=str(path), error=str(e))
            return []
        uri = path.absolute().as_uri()
        project_root = await self.detector.detect_project_root(uri)
        return await self.aggregator_for(project_root).generate(uri, content, project_root)

    async def find_references(self, entity_id: str, paths: list[Path]) -> list[dict[str, Any]]:
        """Positioned occurrences of ``entity_id`` across ``paths``."""
        found: list[dict[str, Any]] = []
        for path in paths:
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as e:
                logger.debug("reference_file_unreadable", path=str(path), error=str(e))
                continue
            project_root = await self.detector.detect_project_root(path.absolute().as_uri())
            context = await self.contexts.get_context(project_root)
            for match in context.detector().matches_for(content, entity_id):
                found.append(
                    {
                        "path": str(path),
                        "range": match.range.to_dict(),
                        "text": match.matched_text,
                        "confidence": match.confidence,
                        "origin": match.origin.value,
                    }
                )
        return found

    @staticmethod
    def manuscript_files(directory: Path) -> list[Path]:
        return sorted(
            p for p in directory.rglob("*") if p.is_file() and p.suffix in MANUSCRIPT_SUFFIXES
        )

    def dispose(self) -> None:
        for aggregator in self._aggregators.values():
            aggregator.dispose()
        self._aggregators.clear()
