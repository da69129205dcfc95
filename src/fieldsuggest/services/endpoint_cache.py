"""Endpoint cache — query results shared by every input bound to an endpoint."""

from __future__ import annotations

import asyncio
import logging

from fieldsuggest.core.exceptions import CacheError
from fieldsuggest.models.candidates import CacheEntry

logger = logging.getLogger(__name__)


class EndpointCache:
    """Maps query strings to fetched entries for one endpoint template.

    A key is either resolved (an entry is stored) or reserved (a fetch is in
    flight). Both count as present so the same query is never fetched twice
    at once. Scheduling is single-threaded, so the reservation is the only
    concurrency control needed.
    """

    def __init__(self, template: str) -> None:
        self.template = template
        self._entries: dict[str, CacheEntry] = {}
        self._pending: dict[str, asyncio.Future] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, query: str) -> bool:
        return self.contains(query)

    def contains(self, query: str) -> bool:
        """True if the query is resolved or has a fetch in flight."""
        return query in self._entries or query in self._pending

    def is_pending(self, query: str) -> bool:
        return query in self._pending

    def get(self, query: str) -> CacheEntry | None:
        """Return the resolved entry for a query, if any."""
        return self._entries.get(query)

    def reserve(self, query: str) -> None:
        """Mark a query as being fetched."""
        if self.contains(query):
            raise CacheError(f"Query already cached or in flight: {query!r}")
        self._pending[query] = asyncio.get_running_loop().create_future()
        logger.debug("Reserved %r on %s", query, self.template)

    def store(self, query: str, entry: CacheEntry) -> None:
        """Resolve a reservation with its fetched entry."""
        future = self._pending.pop(query, None)
        if future is None:
            raise CacheError(f"No reservation for query: {query!r}")
        self._entries[query] = entry
        if not future.done():
            future.set_result(entry)

    def release(self, query: str) -> None:
        """Drop a reservation after a failed fetch so the query can be retried."""
        future = self._pending.pop(query, None)
        if future is not None and not future.done():
            future.set_result(None)

    async def wait(self, query: str) -> CacheEntry | None:
        """Return the entry for a query, waiting for an in-flight fetch."""
        entry = self._entries.get(query)
        if entry is not None:
            return entry
        future = self._pending.get(query)
        if future is None:
            return None
        return await asyncio.shield(future)

    def clear(self) -> None:
        """Drop resolved entries. In-flight reservations are kept."""
        self._entries.clear()


class CacheRegistry:
    """Application-level owner of one EndpointCache per endpoint template."""

    def __init__(self) -> None:
        self._caches: dict[str, EndpointCache] = {}

    def __len__(self) -> int:
        return len(self._caches)

    def for_endpoint(self, template: str) -> EndpointCache:
        """Return the cache for a template, creating it on first use."""
        cache = self._caches.get(template)
        if cache is None:
            cache = self._caches[template] = EndpointCache(template)
        return cache

    def clear(self) -> None:
        self._caches.clear()


default_registry = CacheRegistry()
