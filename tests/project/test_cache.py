"""Tests for the single-flight cache."""

import asyncio

import pytest

from storylens.project.cache import SingleFlightCache


class CountingLoader:
    """Loader that blocks on an event and counts invocations."""

    def __init__(self) -> None:
        self.calls = 0
        self.release = asyncio.Event()

    async def __call__(self, key: str) -> dict[str, str]:
        self.calls += 1
        await self.release.wait()
        return {"key": key}


class TestSingleFlightCache:
    @pytest.mark.asyncio
    async def test_concurrent_requests_share_one_load(self) -> None:
        cache: SingleFlightCache[str, dict[str, str]] = SingleFlightCache()
        loader = CountingLoader()

        first = asyncio.create_task(cache.get_or_load("a", loader))
        second = asyncio.create_task(cache.get_or_load("a", loader))
        await asyncio.sleep(0)
        assert cache.is_pending("a")
        loader.release.set()
        a, b = await asyncio.gather(first, second)

        assert loader.calls == 1
        assert a is b
        assert "a" in cache
        assert len(cache) == 1

    @pytest.mark.asyncio
    async def test_resolved_value_reused(self) -> None:
        cache: SingleFlightCache[str, dict[str, str]] = SingleFlightCache()
        loader = CountingLoader()
        loader.release.set()

        a = await cache.get_or_load("a", loader)
        b = await cache.get_or_load("a", loader)

        assert loader.calls == 1
        assert a is b
        assert cache.peek("a") is a

    @pytest.mark.asyncio
    async def test_distinct_keys_load_separately(self) -> None:
        cache: SingleFlightCache[str, dict[str, str]] = SingleFlightCache()
        loader = CountingLoader()
        loader.release.set()

        await asyncio.gather(cache.get_or_load("a", loader), cache.get_or_load("b", loader))

        assert loader.calls == 2

    @pytest.mark.asyncio
    async def test_failure_not_cached(self) -> None:
        cache: SingleFlightCache[str, str] = SingleFlightCache()
        attempts = 0

        async def flaky(key: str) -> str:
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                raise OSError("disk")
            return key

        with pytest.raises(OSError):
            await cache.get_or_load("a", flaky)
        assert "a" not in cache
        assert not cache.is_pending("a")

        assert await cache.get_or_load("a", flaky) == "a"
        assert attempts == 2

    @pytest.mark.asyncio
    async def test_clear_forces_reload(self) -> None:
        cache: SingleFlightCache[str, dict[str, str]] = SingleFlightCache()
        loader = CountingLoader()
        loader.release.set()

        first = await cache.get_or_load("a", loader)
        cache.clear()
        second = await cache.get_or_load("a", loader)

        assert loader.calls == 2
        assert first is not second

    @pytest.mark.asyncio
    async def test_clear_during_load_does_not_repopulate(self) -> None:
        cache: SingleFlightCache[str, dict[str, str]] = SingleFlightCache()
        loader = CountingLoader()

        pending = asyncio.create_task(cache.get_or_load("a", loader))
        await asyncio.sleep(0)
        cache.clear()
        loader.release.set()
        value = await pending

        assert value == {"key": "a"}
        assert "a" not in cache
        assert cache.peek("a") is None

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_abort_shared_load(self) -> None:
        cache: SingleFlightCache[str, dict[str, str]] = SingleFlightCache()
        loader = CountingLoader()

        impatient = asyncio.create_task(cache.get_or_load("a", loader))
        patient = asyncio.create_task(cache.get_or_load("a", loader))
        await asyncio.sleep(0)
        impatient.cancel()
        loader.release.set()

        assert await patient == {"key": "a"}
        with pytest.raises(asyncio.CancelledError):
            await impatient
        assert loader.calls == 1

    @pytest.mark.asyncio
    async def test_invalidate_drops_resolved_entry(self) -> None:
        cache: SingleFlightCache[str, dict[str, str]] = SingleFlightCache()
        loader = CountingLoader()
        loader.release.set()

        await cache.get_or_load("a", loader)
        cache.invalidate("a")
        cache.invalidate("missing")

        assert "a" not in cache
        await cache.get_or_load("a", loader)
        assert loader.calls == 2
