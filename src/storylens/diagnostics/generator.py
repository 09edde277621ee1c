"""Entity-based diagnostics.

Rules, applied to each document against its project's entity index:

- Low-confidence references: a display name or alias matched in prose may be
  a coincidence. Below ``warning_threshold`` the match is a warning, below
  ``hint_threshold`` a hint.
- Undefined frontmatter references: ids listed under ``characters``,
  ``settings``, ``foreshadowings`` or ``timelines`` that no entity of that
  kind carries.
- Unresolved foreshadowing: annotations pointing at a thread still in the
  ``planted`` state.
"""

from __future__ import annotations

from pathlib import Path

import structlog

from storylens.config.constants import ENTITY_SOURCE_NAME
from storylens.config.models import DiagnosticsConfig
from storylens.detection.frontmatter import find_references
from storylens.detection.models import MatchOrigin, PositionedMatch, Range
from storylens.diagnostics.models import Diagnostic, DiagnosticSeverity
from storylens.diagnostics.source import DiagnosticSource
from storylens.entities.models import ForeshadowingStatus
from storylens.project.context import ProjectContext, ProjectContextManager

logger = structlog.get_logger()


class DiagnosticsGenerator:
    """Applies entity rules to a document. Pure; holds only thresholds."""

    def __init__(self, config: DiagnosticsConfig | None = None) -> None:
        self._config = config or DiagnosticsConfig()

    def generate(self, content: str, context: ProjectContext) -> list[Diagnostic]:
        if not content:
            return []

        diagnostics: list[Diagnostic] = []
        matches = context.detector().detect_all(content)
        for match in matches:
            low = self._low_confidence(match)
            if low is not None:
                diagnostics.append(low)
            if (
                match.origin == MatchOrigin.ANNOTATION
                and match.entity.status == ForeshadowingStatus.PLANTED
            ):
                diagnostics.append(
                    Diagnostic(
                        range=match.range,
                        message=f'Foreshadowing "{match.entity.canonical_name}" is planted but not yet resolved',
                        severity=DiagnosticSeverity.INFO,
                        source=ENTITY_SOURCE_NAME,
                        code="unresolved-foreshadowing",
                    )
                )

        if self._config.check_frontmatter_references:
            diagnostics.extend(self._undefined_references(content, context))

        diagnostics.sort(key=lambda d: (d.range.start, d.range.end))
        logger.debug("entity_diagnostics", matches=len(matches), diagnostics=len(diagnostics))
        return diagnostics

    def _low_confidence(self, match: PositionedMatch) -> Diagnostic | None:
        if match.confidence < self._config.warning_threshold:
            severity = DiagnosticSeverity.WARNING
        elif match.confidence < self._config.hint_threshold:
            severity = DiagnosticSeverity.HINT
        else:
            return None

        entity = match.entity
        return Diagnostic(
            range=match.range,
            message=(
                f'"{match.matched_text}" may refer to {entity.kind.value} '
                f'"{entity.canonical_name}" (confidence {match.confidence:.0%})'
            ),
            severity=severity,
            source=ENTITY_SOURCE_NAME,
            code=f"low-confidence-{entity.kind.value}",
        )

    @staticmethod
    def _undefined_references(content: str, context: ProjectContext) -> list[Diagnostic]:
        index = context.index
        found: list[Diagnostic] = []
        for ref in find_references(content):
            if ref.value in index.ids(ref.kind):
                continue
            found.append(
                Diagnostic(
                    range=Range.on_line(ref.line, ref.start_char, ref.end_char),
                    message=f'Unknown {ref.kind.value} "{ref.value}" in {ref.key}',
                    severity=DiagnosticSeverity.WARNING,
                    source=ENTITY_SOURCE_NAME,
                    code=f"undefined-{ref.kind.value}",
                )
            )
        return found


class EntityDiagnosticSource(DiagnosticSource):
    """Diagnostic source backed by the project's entity context."""

    def __init__(
        self,
        context_manager: ProjectContextManager,
        generator: DiagnosticsGenerator | None = None,
        name: str = ENTITY_SOURCE_NAME,
    ) -> None:
        self.name = name
        self._contexts = context_manager
        self._generator = generator or DiagnosticsGenerator()

    async def is_available(self) -> bool:
        return True

    async def generate(self, uri: str, content: str, project_root: Path) -> list[Diagnostic]:
        context = await self._contexts.get_context(project_root)
        return self._generator.generate(content, context)
