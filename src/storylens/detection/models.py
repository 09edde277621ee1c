"""Detection models - positions, ranges, and positioned matches."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

from storylens.entities.models import DetectableEntity


class MatchOrigin(StrEnum):
    """Which vocabulary variant produced a match."""

    EXPLICIT = "explicit"  # @id or @name
    ID = "id"
    NAME = "name"
    DISPLAY_NAME = "display_name"
    ALIAS = "alias"
    ANNOTATION = "annotation"  # <!-- @foreshadowing:id -->


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based line and character offset."""

    line: int
    character: int

    def to_dict(self) -> dict[str, int]:
        return {"line": self.line, "character": self.character}


@dataclass(frozen=True)
class Range:
    """Half-open text range; ``end`` is exclusive."""

    start: Position
    end: Position

    @classmethod
    def on_line(cls, line: int, start_char: int, end_char: int) -> Range:
        return cls(Position(line, start_char), Position(line, end_char))

    def contains(self, position: Position) -> bool:
        return self.start <= position < self.end

    def to_dict(self) -> dict[str, Any]:
        return {"start": self.start.to_dict(), "end": self.end.to_dict()}


@dataclass(frozen=True)
class PositionedMatch:
    """One occurrence of an entity in a document. Never persisted."""

    entity: DetectableEntity
    range: Range
    matched_text: str
    confidence: float
    origin: MatchOrigin
    in_frontmatter: bool = False

    @property
    def length(self) -> int:
        return self.range.end.character - self.range.start.character
