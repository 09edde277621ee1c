"""Detection module - entity index and positioned detection."""

from storylens.detection.detector import PositionedDetector
from storylens.detection.frontmatter import (
    FrontmatterBlock,
    FrontmatterReference,
    find_frontmatter,
    find_references,
)
from storylens.detection.index import EntityIndex, VocabularyTerm
from storylens.detection.models import MatchOrigin, Position, PositionedMatch, Range

__all__ = [
    "EntityIndex",
    "FrontmatterBlock",
    "FrontmatterReference",
    "MatchOrigin",
    "Position",
    "PositionedDetector",
    "PositionedMatch",
    "Range",
    "VocabularyTerm",
    "find_frontmatter",
    "find_references",
]
