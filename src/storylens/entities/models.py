"""Entity models - detectable entities and their display info."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any


class EntityKind(StrEnum):
    """Kind of domain entity recognized in manuscripts."""

    CHARACTER = "character"
    SETTING = "setting"
    FORESHADOWING = "foreshadowing"
    TIMELINE = "timeline"


class ForeshadowingStatus(StrEnum):
    """Lifecycle of a foreshadowing thread."""

    PLANTED = "planted"
    PARTIALLY_RESOLVED = "partially_resolved"
    RESOLVED = "resolved"
    ABANDONED = "abandoned"


@dataclass(frozen=True)
class DetectableEntity:
    """An entity plus the text variants used to recognize it in prose.

    ``source_path`` is the defining file, relative to the project root.
    ``status`` is only meaningful for foreshadowing.
    """

    kind: EntityKind
    id: str
    canonical_name: str
    source_path: str
    display_names: tuple[str, ...] = ()
    aliases: tuple[str, ...] = ()
    status: ForeshadowingStatus | None = None

    @property
    def key(self) -> str:
        """Identity across kinds (``character:hero``)."""
        return f"{self.kind.value}:{self.id}"

    def vocabulary(self) -> tuple[str, ...]:
        """Match vocabulary: canonical name, display names, aliases (deduplicated, ordered)."""
        seen: dict[str, None] = {}
        for term in (self.canonical_name, *self.display_names, *self.aliases):
            if term:
                seen.setdefault(term, None)
        return tuple(seen)


@dataclass(frozen=True)
class Resolution:
    """One resolution step of a foreshadowing thread."""

    chapter: str
    description: str = ""
    completeness: float = 0.0


@dataclass(frozen=True)
class EntityInfo:
    """Enriched summary used by hover and completion consumers."""

    id: str
    name: str
    kind: EntityKind
    role: str | None = None
    summary: str | None = None
    traits: tuple[str, ...] = ()
    relationships: dict[str, str] = field(default_factory=dict)
    status: str | None = None
    foreshadowing_type: str | None = None
    planting_chapter: str | None = None
    planting_description: str | None = None
    resolutions: tuple[Resolution, ...] = ()
    related_characters: tuple[str, ...] = ()
    related_settings: tuple[str, ...] = ()

    @classmethod
    def from_record(cls, kind: EntityKind, record: dict[str, Any]) -> EntityInfo | None:
        """Build from a raw definition record; None when id or name is missing."""
        entity_id = record.get("id")
        name = record.get("name")
        if not isinstance(entity_id, str) or not isinstance(name, str):
            return None

        summary = _str_or_none(record.get("summary"))

        if kind == EntityKind.CHARACTER:
            relationships = record.get("relationships")
            return cls(
                id=entity_id,
                name=name,
                kind=kind,
                role=_str_or_none(record.get("role")),
                summary=summary,
                traits=_str_tuple(record.get("traits")),
                relationships=(
                    {str(k): str(v) for k, v in relationships.items()}
                    if isinstance(relationships, dict)
                    else {}
                ),
            )

        if kind == EntityKind.FORESHADOWING:
            planting = record.get("planting")
            planting = planting if isinstance(planting, dict) else {}
            relations = record.get("relations")
            relations = relations if isinstance(relations, dict) else {}
            resolutions = record.get("resolutions")
            return cls(
                id=entity_id,
                name=name,
                kind=kind,
                summary=summary,
                status=_str_or_none(record.get("status")),
                foreshadowing_type=_str_or_none(record.get("type")),
                planting_chapter=_str_or_none(planting.get("chapter")),
                planting_description=_str_or_none(planting.get("description")),
                resolutions=tuple(
                    Resolution(
                        chapter=str(r.get("chapter", "")),
                        description=str(r.get("description", "")),
                        completeness=float(r.get("completeness", 0) or 0),
                    )
                    for r in (resolutions if isinstance(resolutions, list) else [])
                    if isinstance(r, dict)
                ),
                related_characters=_str_tuple(relations.get("characters")),
                related_settings=_str_tuple(relations.get("settings")),
            )

        return cls(id=entity_id, name=name, kind=kind, summary=summary)


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _str_tuple(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(v for v in value if isinstance(v, str))
