"""Single-flight memoizing cache.

For any key at most one computation is in flight. Callers that ask for a key
while its computation is pending attach to that same computation instead of
starting another, and all of them receive its result. Once the computation
resolves, its value replaces the pending slot.

``clear()`` drops every entry. A computation that was already pending keeps
running for the callers attached to it, but its result is not written back,
so a snapshot taken before the clear never repopulates the cache.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Hashable
from dataclasses import dataclass
from typing import Generic, TypeVar

import structlog

logger = structlog.get_logger()

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


@dataclass
class CacheEntry(Generic[V]):
    """One key's slot: either a resolved value or a pending computation."""

    value: V | None = None
    inflight: asyncio.Task[V] | None = None
    resolved: bool = False


class SingleFlightCache(Generic[K, V]):
    """Async cache with per-key single-flight loading."""

    def __init__(self, name: str = "cache") -> None:
        self._name = name
        self._entries: dict[K, CacheEntry[V]] = {}
        self._generation = 0

    async def get_or_load(self, key: K, loader: Callable[[K], Awaitable[V]]) -> V:
        """Return the cached value for ``key``, loading it at most once concurrently.

        A failed load is not cached; every caller attached to it sees the error
        and the next request starts a fresh load.
        """
        entry = self._entries.get(key)
        if entry is not None and entry.resolved:
            return entry.value  # type: ignore[return-value]

        if entry is None or entry.inflight is None:
            entry = CacheEntry()
            entry.inflight = asyncio.ensure_future(self._run(key, loader, self._generation))
            self._entries[key] = entry
            logger.debug("cache_load_started", cache=self._name, key=str(key))

        # Shield so one caller's cancellation does not abort the shared load
        return await asyncio.shield(entry.inflight)

    async def _run(self, key: K, loader: Callable[[K], Awaitable[V]], generation: int) -> V:
        try:
            value = await loader(key)
        except BaseException:
            if generation == self._generation:
                self._entries.pop(key, None)
            raise
        if generation == self._generation:
            self._entries[key] = CacheEntry(value=value, resolved=True)
        return value

    def peek(self, key: K) -> V | None:
        """Resolved value for ``key`` without loading."""
        entry = self._entries.get(key)
        return entry.value if entry is not None and entry.resolved else None

    def is_pending(self, key: K) -> bool:
        entry = self._entries.get(key)
        return entry is not None and not entry.resolved

    def invalidate(self, key: K) -> None:
        """Drop one resolved entry. A pending load for the key is left alone."""
        entry = self._entries.get(key)
        if entry is not None and entry.resolved:
            del self._entries[key]

    def clear(self) -> None:
        self._generation += 1
        self._entries.clear()
        logger.debug("cache_cleared", cache=self._name)

    def __len__(self) -> int:
        """Number of resolved entries."""
        return sum(1 for e in self._entries.values() if e.resolved)

    def __contains__(self, key: object) -> bool:
        entry = self._entries.get(key)  # type: ignore[call-overload]
        return entry is not None and entry.resolved
