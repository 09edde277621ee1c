"""Per-project context management.

A ProjectContext bundles everything detection, hover, and completion need for
one project root: the entity list, the entity index, and the id to EntityInfo
map. Contexts are loaded lazily on first request, cached per absolute root,
and replaced wholesale on reload, never mutated.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

import structlog

from storylens.detection.detector import PositionedDetector
from storylens.detection.index import EntityIndex
from storylens.entities.loader import EntityLoader, FileEntityLoader
from storylens.entities.models import DetectableEntity, EntityInfo
from storylens.project.cache import SingleFlightCache

logger = structlog.get_logger()


@dataclass(frozen=True)
class ProjectContext:
    """Immutable snapshot of one project's entities."""

    project_root: Path
    entities: tuple[DetectableEntity, ...] = ()
    entity_info_map: Mapping[str, EntityInfo] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def __post_init__(self) -> None:
        # Build derived lookups once; the dataclass itself stays frozen
        object.__setattr__(self, "_index", EntityIndex(self.entities))

    @property
    def index(self) -> EntityIndex:
        return self._index  # type: ignore[attr-defined,no-any-return]

    def detector(self) -> PositionedDetector:
        return PositionedDetector(self.index)

    @property
    def is_empty(self) -> bool:
        return not self.entities


class ProjectContextManager:
    """Loads and caches ProjectContext per project root (single-flight)."""

    def __init__(self, loader: EntityLoader | None = None) -> None:
        self._loader: EntityLoader = loader or FileEntityLoader()
        self._cache: SingleFlightCache[Path, ProjectContext] = SingleFlightCache("project_context")

    async def get_context(self, project_root: Path) -> ProjectContext:
        """Context for ``project_root``; concurrent first requests share one load."""
        return await self._cache.get_or_load(project_root.absolute(), self._load_context)

    async def _load_context(self, project_root: Path) -> ProjectContext:
        try:
            entities = await self._loader.load_entities(project_root)
        except OSError as e:
            logger.warning("entity_load_failed", project_root=str(project_root), error=str(e))
            entities = []

        info_map: dict[str, EntityInfo] = {}
        for entity in entities:
            try:
                record = await self._loader.load_record(project_root, entity)
            except OSError as e:
                logger.debug("entity_record_unavailable", id=entity.id, error=str(e))
                continue
            if record is None:
                continue
            info = EntityInfo.from_record(entity.kind, record)
            if info is not None:
                info_map.setdefault(entity.id, info)

        context = ProjectContext(
            project_root=project_root,
            entities=tuple(entities),
            entity_info_map=MappingProxyType(info_map),
        )
        logger.info(
            "context_loaded",
            project_root=str(project_root),
            entities=len(context.entities),
            with_info=len(info_map),
        )
        return context

    def clear_cache(self) -> None:
        self._cache.clear()

    def invalidate(self, project_root: Path) -> None:
        """Drop one project's context so the next request reloads it."""
        self._cache.invalidate(project_root.absolute())

    @property
    def cache_size(self) -> int:
        return len(self._cache)
