"""Positioned entity detection.

Scans text line by line with the index's combined alternation pattern. At each
offset the longest vocabulary term wins, and scanning resumes after the match,
so detections on one line never overlap. Frontmatter lines are scanned with the
same vocabulary and addressed by (line, column) like body text.

HTML comment annotations (``<!-- @foreshadowing:id -->`` or ``<!-- @fs:id -->``)
produce a match spanning the whole comment; vocabulary hits inside that comment
are suppressed.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from storylens.config.constants import CONFIDENCE_ANNOTATION
from storylens.detection.frontmatter import find_frontmatter
from storylens.detection.index import EntityIndex
from storylens.detection.models import MatchOrigin, Position, PositionedMatch, Range
from storylens.entities.models import DetectableEntity

_COMMENT = re.compile(r"<!--(.+?)-->")
_ANNOTATION_ID = re.compile(r"@(?:foreshadowing|fs):([^\s>@]+)")


class PositionedDetector:
    """Locates entity mentions in text. Stateless between calls."""

    def __init__(self, index: EntityIndex) -> None:
        self._index = index

    @classmethod
    def from_entities(cls, entities: Sequence[DetectableEntity]) -> PositionedDetector:
        return cls(EntityIndex(entities))

    @property
    def index(self) -> EntityIndex:
        return self._index

    def detect_all(self, content: str) -> list[PositionedMatch]:
        """Return every entity occurrence, ordered by line then column."""
        if not content or len(self._index) == 0:
            return []

        block = find_frontmatter(content)
        matches: list[PositionedMatch] = []
        for line_no, line in enumerate(content.split("\n")):
            in_frontmatter = block is not None and block.contains_line(line_no)
            matches.extend(self._scan_line(line_no, line, in_frontmatter))
        return matches

    def match_at_position(self, content: str, position: Position) -> PositionedMatch | None:
        """Re-scan the line under ``position`` and return the match covering it."""
        if not content or position.line < 0 or position.character < 0:
            return None
        lines = content.split("\n")
        if position.line >= len(lines):
            return None

        block = find_frontmatter(content)
        in_frontmatter = block is not None and block.contains_line(position.line)
        for match in self._scan_line(position.line, lines[position.line], in_frontmatter):
            if match.range.contains(position):
                return match
        return None

    def resolve_at_position(self, content: str, position: Position) -> DetectableEntity | None:
        """Entity whose occurrence contains ``position``, else None."""
        match = self.match_at_position(content, position)
        return match.entity if match is not None else None

    def matches_for(self, content: str, entity_id: str) -> list[PositionedMatch]:
        """Occurrences of a single entity."""
        return [m for m in self.detect_all(content) if m.entity.id == entity_id]

    def _scan_line(self, line_no: int, line: str, in_frontmatter: bool) -> list[PositionedMatch]:
        annotations = self._scan_annotations(line_no, line, in_frontmatter)
        spans = [(m.range.start.character, m.range.end.character) for m in annotations]

        found: list[PositionedMatch] = list(annotations)
        pattern = self._index.pattern
        if pattern is not None:
            for hit in pattern.finditer(line):
                start = hit.start()
                if any(s <= start < e for s, e in spans):
                    continue
                term = self._index.term(hit.group(0))
                if term is None:
                    continue
                found.append(
                    PositionedMatch(
                        entity=term.entity,
                        range=Range.on_line(line_no, start, hit.end()),
                        matched_text=term.text,
                        confidence=term.confidence,
                        origin=term.origin,
                        in_frontmatter=in_frontmatter,
                    )
                )

        if annotations:
            found.sort(key=lambda m: m.range.start.character)
        return found

    def _scan_annotations(
        self, line_no: int, line: str, in_frontmatter: bool
    ) -> list[PositionedMatch]:
        if "<!--" not in line:
            return []

        matches: list[PositionedMatch] = []
        for comment in _COMMENT.finditer(line):
            for ref in _ANNOTATION_ID.finditer(comment.group(1)):
                entity = self._index.find_foreshadowing(ref.group(1))
                if entity is None:
                    continue
                matches.append(
                    PositionedMatch(
                        entity=entity,
                        range=Range.on_line(line_no, comment.start(), comment.end()),
                        matched_text=ref.group(0),
                        confidence=CONFIDENCE_ANNOTATION,
                        origin=MatchOrigin.ANNOTATION,
                        in_frontmatter=in_frontmatter,
                    )
                )
        return matches
