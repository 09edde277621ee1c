"""Project module - root detection and per-project context caching."""

from storylens.project.cache import CacheEntry, SingleFlightCache
from storylens.project.context import ProjectContext, ProjectContextManager
from storylens.project.detector import ProjectDetector, uri_to_path

__all__ = [
    "CacheEntry",
    "ProjectContext",
    "ProjectContextManager",
    "ProjectDetector",
    "SingleFlightCache",
    "uri_to_path",
]
