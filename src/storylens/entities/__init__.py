"""Entity module - domain entities and definition loading."""

from storylens.entities.loader import EntityLoader, FileEntityLoader, record_to_entity
from storylens.entities.models import (
    DetectableEntity,
    EntityInfo,
    EntityKind,
    ForeshadowingStatus,
    Resolution,
)

__all__ = [
    "DetectableEntity",
    "EntityInfo",
    "EntityKind",
    "EntityLoader",
    "FileEntityLoader",
    "ForeshadowingStatus",
    "Resolution",
    "record_to_entity",
]
