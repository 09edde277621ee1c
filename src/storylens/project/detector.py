"""Project root detection.

Walks parent directories from a document toward the filesystem root, looking
for the marker file. Lets one editor session serve several nested projects
(e.g. ``samples/cinderella`` inside a larger repository).
"""

from __future__ import annotations

import asyncio
from collections import OrderedDict
from pathlib import Path
from urllib.parse import unquote, urlparse

import structlog

from storylens.config.constants import MARKER_FILE, MAX_SEARCH_DEPTH, ROOT_CACHE_MAX_ENTRIES

logger = structlog.get_logger()


def uri_to_path(uri: str) -> Path:
    """Convert a ``file://`` URI (or a bare path) to a filesystem path."""
    if uri.startswith("file:"):
        return Path(unquote(urlparse(uri).path))
    return Path(uri)


class ProjectDetector:
    """Resolves the owning project root for a document, with caching.

    Results, fallbacks included, stay cached per URI (least recently used
    evicted first) until ``clear_cache`` is called. Call it after adding,
    moving or removing marker files.

    Args:
        fallback_root: Returned when no marker is found within the search depth.
        marker_file: Sentinel file name marking a project root.
        max_depth: Maximum number of directories examined per lookup.
        max_entries: Cached URIs kept before the least recently used is dropped.
    """

    def __init__(
        self,
        fallback_root: Path,
        *,
        marker_file: str = MARKER_FILE,
        max_depth: int = MAX_SEARCH_DEPTH,
        max_entries: int = ROOT_CACHE_MAX_ENTRIES,
    ) -> None:
        self._fallback_root = fallback_root
        self._marker_file = marker_file
        self._max_depth = max_depth
        self._max_entries = max_entries
        self._cache: OrderedDict[str, Path] = OrderedDict()

    @property
    def fallback_root(self) -> Path:
        return self._fallback_root

    async def detect_project_root(self, file_uri: str) -> Path:
        """Project root for ``file_uri``; the fallback root when no marker is found."""
        cached = self._cache.get(file_uri)
        if cached is not None:
            self._cache.move_to_end(file_uri)
            return cached

        loop = asyncio.get_running_loop()
        found = await loop.run_in_executor(None, self._find_marker_dir, uri_to_path(file_uri))
        root = found if found is not None else self._fallback_root
        self._cache[file_uri] = root
        while len(self._cache) > self._max_entries:
            self._cache.popitem(last=False)
        return root

    def _find_marker_dir(self, start: Path) -> Path | None:
        try:
            if not start.exists():
                logger.debug("project_path_missing", path=str(start))
                return None
            current = start.parent if start.is_file() else start
        except OSError as e:
            logger.debug("project_path_unreadable", path=str(start), error=str(e))
            return None

        current = current.absolute()
        for _ in range(self._max_depth):
            try:
                if (current / self._marker_file).is_file():
                    return current
            except OSError:
                pass
            parent = current.parent
            if parent == current:
                break
            current = parent

        logger.debug("project_root_fallback", path=str(start), fallback=str(self._fallback_root))
        return None

    def clear_cache(self) -> None:
        self._cache.clear()

    @property
    def cache_size(self) -> int:
        return len(self._cache)
