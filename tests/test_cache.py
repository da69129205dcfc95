"""Tests for the endpoint cache, cache registry and debouncer."""

from __future__ import annotations

import asyncio

import pytest

from fieldsuggest.core.exceptions import CacheError
from fieldsuggest.models.candidates import CacheEntry
from fieldsuggest.services.debouncer import Debouncer
from fieldsuggest.services.endpoint_cache import CacheRegistry, EndpointCache

from conftest import API


class TestCacheRegistry:
    def test_same_template_shares_cache(self):
        registry = CacheRegistry()
        assert registry.for_endpoint(API) is registry.for_endpoint(API)
        assert len(registry) == 1

    def test_different_templates(self):
        registry = CacheRegistry()
        a = registry.for_endpoint(API)
        b = registry.for_endpoint("https://other.example/${q}")
        assert a is not b
        assert a.template == API

    def test_clear(self):
        registry = CacheRegistry()
        first = registry.for_endpoint(API)
        registry.clear()
        assert len(registry) == 0
        assert registry.for_endpoint(API) is not first


class TestEndpointCache:
    def test_reserve_then_store(self):
        async def run():
            cache = EndpointCache(API)
            cache.reserve("Lo")
            assert cache.contains("Lo")
            assert cache.is_pending("Lo")
            assert cache.get("Lo") is None

            entry = CacheEntry(query="Lo", candidates=["London"])
            cache.store("Lo", entry)
            assert not cache.is_pending("Lo")
            assert cache.get("Lo") is entry
            assert "Lo" in cache
            assert len(cache) == 1

        asyncio.run(run())

    def test_double_reserve_rejected(self):
        async def run():
            cache = EndpointCache(API)
            cache.reserve("Lo")
            with pytest.raises(CacheError):
                cache.reserve("Lo")

        asyncio.run(run())

    def test_store_without_reservation(self):
        cache = EndpointCache(API)
        with pytest.raises(CacheError, match="No reservation"):
            cache.store("Lo", CacheEntry(query="Lo"))

    def test_wait_for_in_flight(self):
        async def run():
            cache = EndpointCache(API)
            cache.reserve("Lo")
            waiter = asyncio.create_task(cache.wait("Lo"))
            await asyncio.sleep(0)
            entry = CacheEntry(query="Lo")
            cache.store("Lo", entry)
            return entry, await waiter

        entry, waited = asyncio.run(run())
        assert waited is entry

    def test_release_wakes_waiters_and_allows_retry(self):
        async def run():
            cache = EndpointCache(API)
            cache.reserve("Lo")
            waiter = asyncio.create_task(cache.wait("Lo"))
            await asyncio.sleep(0)
            cache.release("Lo")
            assert await waiter is None
            assert not cache.contains("Lo")
            cache.reserve("Lo")
            assert cache.is_pending("Lo")

        asyncio.run(run())

    def test_wait_unknown_query(self):
        assert asyncio.run(EndpointCache(API).wait("Lo")) is None

    def test_clear_keeps_reservations(self):
        async def run():
            cache = EndpointCache(API)
            cache.reserve("Lo")
            cache.store("Lo", CacheEntry(query="Lo"))
            cache.reserve("Par")
            cache.clear()
            assert not cache.contains("Lo")
            assert cache.is_pending("Par")

        asyncio.run(run())


class TestDebouncer:
    def test_only_last_trigger_fires(self):
        fired = []

        async def run():
            debouncer = Debouncer(delay=0.01)
            for text in ("L", "Lo", "Lon"):
                debouncer.schedule(lambda text=text: fired.append(text))
            assert debouncer.pending
            await asyncio.sleep(0.05)
            assert not debouncer.pending

        asyncio.run(run())
        assert fired == ["Lon"]

    def test_cancel(self):
        fired = []

        async def run():
            debouncer = Debouncer(delay=0.01)
            debouncer.schedule(lambda: fired.append("Lo"))
            debouncer.cancel()
            assert not debouncer.pending
            await asyncio.sleep(0.05)

        asyncio.run(run())
        assert fired == []

    def test_async_trigger_runs_as_task(self):
        fired = []

        async def trigger():
            await asyncio.sleep(0)
            fired.append("done")

        async def run():
            debouncer = Debouncer(delay=0)
            debouncer.schedule(trigger)
            await asyncio.sleep(0.01)
            await debouncer.drain()

        asyncio.run(run())
        assert fired == ["done"]

    def test_cancel_does_not_stop_started_trigger(self):
        fired = []

        async def run():
            gate = asyncio.Event()

            async def trigger():
                await gate.wait()
                fired.append("done")

            debouncer = Debouncer(delay=0)
            debouncer.schedule(trigger)
            await asyncio.sleep(0.01)
            debouncer.cancel()
            gate.set()
            await debouncer.drain()

        asyncio.run(run())
        assert fired == ["done"]
