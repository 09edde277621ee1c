"""Go-to-definition for entity mentions."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from storylens.detection.models import Position, Range
from storylens.project.context import ProjectContextManager


class DefinitionProvider:
    """Resolves a mention to the file that defines its entity."""

    def __init__(self, context_manager: ProjectContextManager) -> None:
        self._contexts = context_manager

    async def get_definition(
        self, content: str, position: Position, project_root: Path
    ) -> dict[str, Any] | None:
        context = await self._contexts.get_context(project_root)
        entity = context.detector().resolve_at_position(content, position)
        if entity is None:
            return None
        target = (context.project_root / entity.source_path).absolute()
        return {
            "uri": target.as_uri(),
            "range": Range.on_line(0, 0, 0).to_dict(),
        }
