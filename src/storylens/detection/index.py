"""Entity index - normalized, queryable vocabulary over a project's entities.

Terms are ordered by descending length so that the combined alternation
pattern prefers the longest variant starting at any given offset. When two
entities share a term, the entity listed first keeps it.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import structlog

from storylens.config.constants import (
    CONFIDENCE_ALIAS,
    CONFIDENCE_DISPLAY_NAME,
    CONFIDENCE_EXPLICIT,
    CONFIDENCE_ID,
    CONFIDENCE_NAME,
)
from storylens.detection.models import MatchOrigin
from storylens.entities.models import DetectableEntity, EntityKind

logger = structlog.get_logger()

_ASCII_WORD = re.compile(r"[A-Za-z0-9_]")


@dataclass(frozen=True)
class VocabularyTerm:
    """A single matchable string and the entity it denotes."""

    text: str
    entity: DetectableEntity
    origin: MatchOrigin
    confidence: float


def _term_pattern(text: str) -> str:
    """Escape a term; ASCII terms may not touch neighbouring ASCII word characters."""
    escaped = re.escape(text)
    if not text.isascii():
        return escaped
    if _ASCII_WORD.match(text[0]):
        escaped = r"(?<![A-Za-z0-9_])" + escaped
    if _ASCII_WORD.match(text[-1]):
        escaped = escaped + r"(?![A-Za-z0-9_])"
    return escaped


def _entity_terms(entity: DetectableEntity) -> Iterable[tuple[str, MatchOrigin, float]]:
    name = entity.canonical_name
    yield f"@{entity.id}", MatchOrigin.EXPLICIT, CONFIDENCE_EXPLICIT
    if name and name != entity.id:
        yield f"@{name}", MatchOrigin.EXPLICIT, CONFIDENCE_EXPLICIT
    yield entity.id, MatchOrigin.ID, CONFIDENCE_ID
    if name and name != entity.id:
        yield name, MatchOrigin.NAME, CONFIDENCE_NAME
    for display_name in entity.display_names:
        if display_name and display_name not in (name, entity.id):
            yield display_name, MatchOrigin.DISPLAY_NAME, CONFIDENCE_DISPLAY_NAME
    for alias in entity.aliases:
        if alias:
            yield alias, MatchOrigin.ALIAS, CONFIDENCE_ALIAS


class EntityIndex:
    """Immutable lookup structure built once per project context."""

    def __init__(self, entities: Sequence[DetectableEntity]) -> None:
        self._by_key: dict[str, DetectableEntity] = {}
        self._by_id: dict[str, DetectableEntity] = {}
        self._terms: dict[str, VocabularyTerm] = {}

        for entity in entities:
            if entity.key in self._by_key:
                logger.warning("duplicate_entity_id", kind=entity.kind.value, id=entity.id)
                continue
            self._by_key[entity.key] = entity
            self._by_id.setdefault(entity.id, entity)
            for text, origin, confidence in _entity_terms(entity):
                existing = self._terms.get(text)
                if existing is None:
                    self._terms[text] = VocabularyTerm(text, entity, origin, confidence)
                elif existing.entity is not entity:
                    logger.debug(
                        "vocabulary_term_shadowed",
                        term=text,
                        kept=existing.entity.key,
                        dropped=entity.key,
                    )

        self._entities: tuple[DetectableEntity, ...] = tuple(self._by_key.values())

        # Stable sort: equal lengths keep registration order
        ordered = sorted(self._terms.values(), key=lambda t: -len(t.text))
        self._ordered_terms: tuple[VocabularyTerm, ...] = tuple(ordered)
        self._pattern: re.Pattern[str] | None = (
            re.compile("|".join(_term_pattern(t.text) for t in ordered)) if ordered else None
        )

    def __len__(self) -> int:
        return len(self._by_key)

    @property
    def entities(self) -> tuple[DetectableEntity, ...]:
        return self._entities

    @property
    def terms(self) -> tuple[VocabularyTerm, ...]:
        """Vocabulary in match-precedence order (longest first)."""
        return self._ordered_terms

    @property
    def pattern(self) -> re.Pattern[str] | None:
        """Combined alternation over all terms, or None for an empty index."""
        return self._pattern

    def term(self, text: str) -> VocabularyTerm | None:
        return self._terms.get(text)

    def get(self, entity_id: str, kind: EntityKind | None = None) -> DetectableEntity | None:
        """Look up by id, optionally restricted to one kind."""
        if kind is None:
            return self._by_id.get(entity_id)
        return self._by_key.get(f"{kind.value}:{entity_id}")

    def by_kind(self, kind: EntityKind) -> list[DetectableEntity]:
        return [e for e in self._entities if e.kind == kind]

    def ids(self, kind: EntityKind) -> set[str]:
        return {e.id for e in self._entities if e.kind == kind}

    def find_foreshadowing(self, ref: str) -> DetectableEntity | None:
        """Resolve an annotation reference by foreshadowing id or canonical name."""
        entity = self.get(ref, EntityKind.FORESHADOWING)
        if entity is not None:
            return entity
        for candidate in self.by_kind(EntityKind.FORESHADOWING):
            if candidate.canonical_name == ref:
                return candidate
        return None
