"""Hover cards for entity mentions."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from storylens.detection.models import Position
from storylens.entities.models import DetectableEntity, EntityInfo, EntityKind
from storylens.project.context import ProjectContextManager

_KIND_LABEL: dict[EntityKind, str] = {
    EntityKind.CHARACTER: "Character",
    EntityKind.SETTING: "Setting",
    EntityKind.FORESHADOWING: "Foreshadowing",
    EntityKind.TIMELINE: "Timeline",
}


def render_card(entity: DetectableEntity, info: EntityInfo | None) -> str:
    """Markdown summary of an entity, enriched with its info when available."""
    lines = [f"### {info.name if info else entity.canonical_name}", ""]
    lines.append(f"**{_KIND_LABEL[entity.kind]}** `{entity.id}`")

    if info is None:
        return "\n".join(lines)

    if info.role:
        lines.append(f"- Role: {info.role}")
    if info.status:
        lines.append(f"- Status: {info.status}")
    if info.foreshadowing_type:
        lines.append(f"- Type: {info.foreshadowing_type}")
    if info.summary:
        lines.extend(["", info.summary])
    if info.traits:
        lines.extend(["", "**Traits:** " + ", ".join(info.traits)])
    if info.relationships:
        lines.extend(["", "**Relationships:**"])
        lines.extend(f"- {other}: {relation}" for other, relation in info.relationships.items())
    if info.planting_chapter:
        planted = f"**Planted:** {info.planting_chapter}"
        if info.planting_description:
            planted += f" ({info.planting_description})"
        lines.extend(["", planted])
    if info.resolutions:
        lines.extend(["", "**Resolutions:**"])
        lines.extend(
            f"- {r.chapter}: {r.description} ({r.completeness:.0%})" for r in info.resolutions
        )
    if info.related_characters:
        lines.extend(["", "**Characters:** " + ", ".join(info.related_characters)])
    if info.related_settings:
        lines.extend(["", "**Settings:** " + ", ".join(info.related_settings)])
    return "\n".join(lines)


class HoverProvider:
    def __init__(self, context_manager: ProjectContextManager) -> None:
        self._contexts = context_manager

    async def get_hover(
        self, content: str, position: Position, project_root: Path
    ) -> dict[str, Any] | None:
        """LSP Hover for the entity under ``position``, or None."""
        context = await self._contexts.get_context(project_root)
        match = context.detector().match_at_position(content, position)
        if match is None:
            return None
        info = context.entity_info_map.get(match.entity.id)
        return {
            "contents": {"kind": "markdown", "value": render_card(match.entity, info)},
            "range": match.range.to_dict(),
        }
