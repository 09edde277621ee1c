"""Project structure exposed as MCP resources."""

from __future__ import annotations

import asyncio
import dataclasses
import json
from pathlib import Path
from typing import Any
from urllib.parse import quote

import structlog

from storylens.config.constants import MANUSCRIPT_DIR, RESOURCE_SCHEME
from storylens.core.errors import ResourceUriError
from storylens.detection.frontmatter import find_frontmatter
from storylens.entities.loader import EntityLoader, FileEntityLoader
from storylens.entities.models import DetectableEntity, EntityInfo, EntityKind
from storylens.mcp.uri import ParsedUri, ResourceType, SubResource, parse_resource_uri
from storylens.project.context import ProjectContext, ProjectContextManager

logger = structlog.get_logger()

_COLLECTIONS: dict[ResourceType, EntityKind] = {
    ResourceType.CHARACTERS: EntityKind.CHARACTER,
    ResourceType.SETTINGS: EntityKind.SETTING,
    ResourceType.TIMELINES: EntityKind.TIMELINE,
    ResourceType.FORESHADOWINGS: EntityKind.FORESHADOWING,
}

_SINGLES: dict[ResourceType, EntityKind] = {
    ResourceType.CHARACTER: EntityKind.CHARACTER,
    ResourceType.SETTING: EntityKind.SETTING,
    ResourceType.TIMELINE: EntityKind.TIMELINE,
    ResourceType.FORESHADOWING: EntityKind.FORESHADOWING,
}


def entity_to_dict(entity: DetectableEntity, info: EntityInfo | None) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": entity.id,
        "kind": entity.kind.value,
        "name": entity.canonical_name,
        "displayNames": list(entity.display_names),
        "aliases": list(entity.aliases),
        "sourcePath": entity.source_path,
    }
    if entity.status is not None:
        data["status"] = entity.status.value
    if info is not None:
        extra = dataclasses.asdict(info)
        for key in ("id", "name", "kind"):
            extra.pop(key)
        data["info"] = {k: v for k, v in extra.items() if v not in (None, (), [], {})}
    return data


def _resource(uri: str, name: str, description: str) -> dict[str, str]:
    return {"uri": uri, "name": name, "mimeType": "application/json", "description": description}


class ProjectResourceProvider:
    """Lists and reads ``storyteller://`` resources for one project."""

    def __init__(
        self,
        project_root: Path,
        context_manager: ProjectContextManager,
        loader: EntityLoader | None = None,
    ) -> None:
        self._project_root = project_root.absolute()
        self._contexts = context_manager
        self._loader: EntityLoader = loader or FileEntityLoader()

    async def list_resources(self) -> list[dict[str, str]]:
        context = await self._contexts.get_context(self._project_root)
        base = f"{RESOURCE_SCHEME}://"
        resources = [
            _resource(f"{base}project", "Project", "Entity counts and manuscripts"),
            _resource(f"{base}chapters", "Chapters", "Manuscript files"),
        ]
        for resource_type, kind in _COLLECTIONS.items():
            resources.append(
                _resource(f"{base}{resource_type.value}", resource_type.value.title(), f"All {kind.value} entities")
            )
        for entity in context.entities:
            info = context.entity_info_map.get(entity.id)
            resources.append(
                _resource(
                    f"{base}{entity.kind.value}/{quote(entity.id, safe='')}",
                    f"{entity.kind.value.title()}: {entity.id}",
                    (info.summary if info and info.summary else entity.canonical_name),
                )
            )
        return resources

    async def read_resource(self, uri: str) -> str:
        """JSON text for ``uri``.

        Raises:
            ResourceUriError: Malformed URI, unsupported scheme or type, or unknown id.
        """
        parsed = parse_resource_uri(uri)
        payload = await self._read(uri, parsed)
        return json.dumps(payload, ensure_ascii=False, indent=2)

    async def _read(self, uri: str, parsed: ParsedUri) -> Any:
        context = await self._contexts.get_context(self._project_root)

        if parsed.type == ResourceType.PROJECT:
            if parsed.id not in (None, "structure"):
                raise ResourceUriError.not_found(uri)
            return await self._project_summary(context)

        if parsed.type in _COLLECTIONS:
            kind = _COLLECTIONS[parsed.type]
            return [
                entity_to_dict(e, context.entity_info_map.get(e.id))
                for e in context.index.by_kind(kind)
            ]

        if parsed.type in _SINGLES:
            if parsed.id is None:
                raise ResourceUriError.invalid_uri(uri)
            entity = context.index.get(parsed.id, _SINGLES[parsed.type])
            if entity is None:
                raise ResourceUriError.not_found(uri)
            if parsed.sub_resource is not None:
                return await self._read_phase(uri, parsed, entity)
            return entity_to_dict(entity, context.entity_info_map.get(entity.id))

        if parsed.type == ResourceType.CHAPTERS or parsed.id is None:
            return await self._list_manuscripts()
        return await self._read_manuscript(uri, parsed.id, context)

    async def _read_phase(self, uri: str, parsed: ParsedUri, entity: DetectableEntity) -> Any:
        if entity.kind != EntityKind.CHARACTER:
            raise ResourceUriError.unsupported_type(uri, f"{parsed.type.value}/{parsed.sub_resource}")
        record = await self._loader.load_record(self._project_root, entity) or {}
        phases = [p for p in record.get("phases") or [] if isinstance(p, dict)]

        if parsed.sub_resource == SubResource.PHASES:
            return phases

        phase = next((p for p in phases if p.get("id") == parsed.sub_id), None)
        if phase is None:
            raise ResourceUriError.not_found(uri)
        if parsed.sub_resource == SubResource.PHASE:
            return phase

        # Snapshot: base definition with the phase's changes applied on top
        snapshot = {k: v for k, v in record.items() if k != "phases"}
        changes = phase.get("changes")
        if isinstance(changes, dict):
            snapshot.update(changes)
        snapshot["phase"] = phase.get("id")
        return snapshot

    async def _project_summary(self, context: ProjectContext) -> dict[str, Any]:
        return {
            "projectRoot": str(context.project_root),
            "counts": {kind.value: len(context.index.by_kind(kind)) for kind in EntityKind},
            "entities": [
                entity_to_dict(e, context.entity_info_map.get(e.id)) for e in context.entities
            ],
            "manuscripts": [m["path"] for m in await self._list_manuscripts()],
        }

    def _manuscript_paths(self) -> list[Path]:
        directory = self._project_root / MANUSCRIPT_DIR
        if not directory.is_dir():
            return []
        return sorted(p for p in directory.rglob("*.md") if p.is_file())

    def _manuscript_summaries(self) -> list[dict[str, Any]]:
        summaries: list[dict[str, Any]] = []
        for path in self._manuscript_paths():
            entry: dict[str, Any] = {
                "id": path.stem,
                "path": path.relative_to(self._project_root).as_posix(),
            }
            try:
                block = find_frontmatter(path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError) as e:
                logger.debug("manuscript_unreadable", path=str(path), error=str(e))
                block = None
            if block is not None:
                for key in ("title", "chapter_id", "order"):
                    if key in block.fields:
                        entry[key] = block.fields[key]
            summaries.append(entry)
        return summaries

    async def _list_manuscripts(self) -> list[dict[str, Any]]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._manuscript_summaries)

    async def _read_manuscript(
        self, uri: str, manuscript_id: str, context: ProjectContext
    ) -> dict[str, Any]:
        path = next((p for p in self._manuscript_paths() if p.stem == manuscript_id), None)
        if path is None:
            raise ResourceUriError.not_found(uri)
        loop = asyncio.get_running_loop()
        content = await loop.run_in_executor(None, path.read_text, "utf-8")
        matches = context.detector().detect_all(content)
        return {
            "id": manuscript_id,
            "path": path.relative_to(self._project_root).as_posix(),
            "references": [
                {
                    "id": m.entity.id,
                    "kind": m.entity.kind.value,
                    "text": m.matched_text,
                    "range": m.range.to_dict(),
                    "confidence": m.confidence,
                }
                for m in matches
            ],
        }
