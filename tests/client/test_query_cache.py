"""
Unit Tests for QueryCache
"""
import asyncio

import pytest

from reportverse_client.cache import QueryCache


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class CountingLoader:
    def __init__(self, results=None):
        self.calls = 0
        self.results = results

    async def __call__(self):
        self.calls += 1
        if isinstance(self.results, Exception):
            raise self.results
        return self.results if self.results is not None else {"call": self.calls}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return QueryCache(default_ttl=300, clock=clock)


class TestFreshnessWindow:

    @pytest.mark.asyncio
    async def test_second_fetch_inside_window_is_served_from_cache(self, cache, clock):
        loader = CountingLoader()

        first = await cache.fetch(("mentor", "dashboard"), loader)
        clock.advance(299)
        second = await cache.fetch(("mentor", "dashboard"), loader)

        assert loader.calls == 1
        assert first is second
        assert cache.stats()["hits"] == 1

    @pytest.mark.asyncio
    async def test_refresh_always_goes_to_network(self, cache):
        loader = CountingLoader()

        await cache.fetch(("mentor", "dashboard"), loader)
        refreshed = await cache.refresh(("mentor", "dashboard"), loader)

        assert loader.calls == 2
        assert refreshed == {"call": 2}
        assert cache.get(("mentor", "dashboard")) == {"call": 2}

    @pytest.mark.asyncio
    async def test_expired_entry_reloads(self, cache, clock):
        loader = CountingLoader()

        await cache.fetch(("k",), loader)
        clock.advance(300)
        await cache.fetch(("k",), loader)

        assert loader.calls == 2

    @pytest.mark.asyncio
    async def test_per_key_ttl(self, cache, clock):
        loader = CountingLoader()

        await cache.fetch(("mentor", "dashboard"), loader, ttl=30)
        clock.advance(31)
        await cache.fetch(("mentor", "dashboard"), loader, ttl=30)

        assert loader.calls == 2

    @pytest.mark.asyncio
    async def test_keys_are_independent(self, cache):
        loader = CountingLoader()

        await cache.fetch(("mentor", "issue", "a"), loader)
        await cache.fetch(("mentor", "issue", "b"), loader)

        assert loader.calls == 2

    @pytest.mark.asyncio
    async def test_overlapping_refreshes_keep_the_later_response(self, cache):
        release_slow = asyncio.Event()

        async def slow():
            await release_slow.wait()
            return "slow"

        async def fast():
            release_slow.set()
            return "fast"

        results = await asyncio.gather(
            cache.refresh(("mentor", "issues"), slow),
            cache.refresh(("mentor", "issues"), fast),
        )

        assert results == ["slow", "fast"]
        assert cache.get(("mentor", "issues")) == "slow"
        assert cache.stats()["misses"] == 2


class TestErrors:

    @pytest.mark.asyncio
    async def test_failed_reload_keeps_stale_data(self, cache):
        await cache.fetch(("k",), CountingLoader(["cached"]))

        with pytest.raises(RuntimeError):
            await cache.refresh(("k",), CountingLoader(RuntimeError("offline")))

        entry = cache.entry(("k",))
        assert entry.data == ["cached"]
        assert isinstance(entry.error, RuntimeError)
        assert entry.is_loading is False

    @pytest.mark.asyncio
    async def test_entry_with_error_is_retried(self, cache):
        with pytest.raises(RuntimeError):
            await cache.fetch(("k",), CountingLoader(RuntimeError("offline")))

        loader = CountingLoader(["ok"])
        assert await cache.fetch(("k",), loader) == ["ok"]
        assert loader.calls == 1
        assert cache.entry(("k",)).error is None


class TestMutations:

    @pytest.mark.asyncio
    async def test_patch_updates_in_place(self, cache):
        await cache.fetch(("issues",), CountingLoader([1, 2]))

        assert cache.patch(("issues",), lambda items: [0] + items) is True
        assert cache.get(("issues",)) == [0, 1, 2]

    def test_patch_without_data_is_a_no_op(self, cache):
        assert cache.patch(("issues",), lambda items: items + [1]) is False
        assert cache.get(("issues",)) is None

    @pytest.mark.asyncio
    async def test_set_counts_as_fresh(self, cache):
        cache.set(("issue", "a"), {"id": "a"})
        loader = CountingLoader()

        assert await cache.fetch(("issue", "a"), loader) == {"id": "a"}
        assert loader.calls == 0

    @pytest.mark.asyncio
    async def test_invalidate_by_prefix(self, cache):
        for key in [("mentor", "issues"), ("mentor", "issue", "a"), ("mentee", "issues")]:
            cache.set(key, [])

        removed = cache.invalidate(("mentor",))

        assert removed == 2
        assert cache.entry(("mentor", "issues")) is None
        assert cache.entry(("mentee", "issues")) is not None
