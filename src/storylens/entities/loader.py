"""Entity definition loading.

The loader is the only input the project context needs from the definition
store. ``FileEntityLoader`` reads YAML or JSON records from the conventional
per-kind directories under a project root::

    src/characters/hero.yaml      -> {id, name, displayNames?, aliases?, ...}
    src/foreshadowings/hints.json -> [{id, name, status, ...}, ...]

A file may hold a single record or a list of records. Unreadable files and
records without a string ``id`` and ``name`` are skipped.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any, Protocol

import structlog
import yaml

from storylens.config.constants import DEFINITION_SUFFIXES, ENTITY_DIRS
from storylens.entities.models import DetectableEntity, EntityKind, ForeshadowingStatus

logger = structlog.get_logger()


class EntityLoader(Protocol):
    """Protocol for entity definition collaborators."""

    async def load_entities(self, project_root: Path) -> list[DetectableEntity]:
        """Load all detectable entities under ``project_root``, in stable order."""
        ...

    async def load_record(self, project_root: Path, entity: DetectableEntity) -> dict[str, Any] | None:
        """Raw definition record for ``entity``, or None when unavailable."""
        ...


def _read_records(path: Path) -> list[dict[str, Any]]:
    """Read one definition file into a list of mapping records."""
    try:
        text = path.read_text(encoding="utf-8")
        data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError, yaml.YAMLError) as e:
        logger.warning("entity_definition_unreadable", path=str(path), error=str(e))
        return []
    if isinstance(data, dict):
        return [data]
    if isinstance(data, list):
        return [r for r in data if isinstance(r, dict)]
    return []


def _str_tuple(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(v for v in value if isinstance(v, str) and v)


def _parse_status(value: Any) -> ForeshadowingStatus | None:
    try:
        return ForeshadowingStatus(value) if isinstance(value, str) else None
    except ValueError:
        return None


def record_to_entity(
    kind: EntityKind, record: dict[str, Any], source_path: str
) -> DetectableEntity | None:
    """Convert a raw record into a DetectableEntity, or None when it lacks id/name."""
    entity_id = record.get("id")
    name = record.get("name")
    if not isinstance(entity_id, str) or not isinstance(name, str) or not entity_id:
        return None
    return DetectableEntity(
        kind=kind,
        id=entity_id,
        canonical_name=name,
        source_path=source_path,
        display_names=_str_tuple(record.get("displayNames", record.get("display_names"))),
        aliases=_str_tuple(record.get("aliases")),
        status=_parse_status(record.get("status")) if kind == EntityKind.FORESHADOWING else None,
    )


class FileEntityLoader:
    """Loads entity definitions from YAML/JSON files in the project tree."""

    def __init__(self, entity_dirs: dict[str, str] | None = None) -> None:
        self._entity_dirs = entity_dirs or ENTITY_DIRS

    async def load_entities(self, project_root: Path) -> list[DetectableEntity]:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._load_entities_sync, project_root)

    async def load_record(self, project_root: Path, entity: DetectableEntity) -> dict[str, Any] | None:
        loop = asyncio.get_running_loop()
        records = await loop.run_in_executor(
            None, _read_records, project_root / entity.source_path
        )
        for record in records:
            if record.get("id") == entity.id:
                return record
        return None

    def _load_entities_sync(self, project_root: Path) -> list[DetectableEntity]:
        entities: list[DetectableEntity] = []
        for kind_name, rel_dir in self._entity_dirs.items():
            kind = EntityKind(kind_name)
            directory = project_root / rel_dir
            if not directory.is_dir():
                continue
            for path in sorted(directory.iterdir()):
                if not path.is_file() or path.suffix not in DEFINITION_SUFFIXES:
                    continue
                source_path = path.relative_to(project_root).as_posix()
                for record in _read_records(path):
                    entity = record_to_entity(kind, record, source_path)
                    if entity is not None:
                        entities.append(entity)
        logger.debug("entities_loaded", project_root=str(project_root), count=len(entities))
        return entities
