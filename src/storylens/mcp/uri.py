"""Resource URI parsing.

URIs have the form ``storyteller://type[/id[/sub_resource[/sub_id]]]``::

    storyteller://characters
    storyteller://character/hero
    storyteller://character/hero/phases
    storyteller://character/hero/phase/awakening
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from urllib.parse import unquote, urlsplit

from storylens.config.constants import RESOURCE_SCHEME
from storylens.core.errors import ResourceUriError


class ResourceType(StrEnum):
    CHARACTERS = "characters"
    CHARACTER = "character"
    SETTINGS = "settings"
    SETTING = "setting"
    TIMELINES = "timelines"
    TIMELINE = "timeline"
    FORESHADOWINGS = "foreshadowings"
    FORESHADOWING = "foreshadowing"
    CHAPTERS = "chapters"
    MANUSCRIPT = "manuscript"
    PROJECT = "project"


class SubResource(StrEnum):
    PHASES = "phases"
    PHASE = "phase"
    SNAPSHOT = "snapshot"


@dataclass(frozen=True)
class ParsedUri:
    type: ResourceType
    id: str | None = None
    sub_resource: SubResource | None = None
    sub_id: str | None = None


def parse_resource_uri(uri: str) -> ParsedUri:
    """Parse a resource URI.

    Raises:
        ResourceUriError: The URI is malformed, or its scheme or type is unsupported.
            An unknown sub-resource segment is ignored.
    """
    if "://" not in uri:
        raise ResourceUriError.invalid_uri(uri)
    try:
        parts = urlsplit(uri)
    except ValueError:
        raise ResourceUriError.invalid_uri(uri) from None

    if not parts.scheme:
        raise ResourceUriError.invalid_uri(uri)
    if parts.scheme != RESOURCE_SCHEME:
        raise ResourceUriError.unsupported_scheme(uri, parts.scheme)
    if not parts.netloc:
        raise ResourceUriError.invalid_uri(uri)

    try:
        resource_type = ResourceType(parts.netloc)
    except ValueError:
        raise ResourceUriError.unsupported_type(uri, parts.netloc) from None

    segments = [unquote(s) for s in parts.path.split("/") if s]
    entity_id = segments[0] if segments else None

    sub_resource: SubResource | None = None
    sub_id: str | None = None
    if len(segments) > 1 and segments[1] in {s.value for s in SubResource}:
        sub_resource = SubResource(segments[1])
        sub_id = segments[2] if len(segments) > 2 else None

    return ParsedUri(resource_type, entity_id, sub_resource, sub_id)
