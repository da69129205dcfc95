"""Suggest service — binds inputs to controllers that share caches and a fetcher."""

from __future__ import annotations

from typing import Any

from fieldsuggest.models.candidates import CacheEntry
from fieldsuggest.models.options import EndpointOptions
from fieldsuggest.services.endpoint_cache import CacheRegistry, default_registry
from fieldsuggest.services.fetcher import RemoteFetcher, Requester
from fieldsuggest.services.query_controller import QueryController


class SuggestService:
    """Entry point used by the front ends."""

    def __init__(
        self,
        registry: CacheRegistry | None = None,
        requester: Requester | None = None,
    ) -> None:
        self.registry = registry if registry is not None else default_registry
        self.fetcher = RemoteFetcher(requester)

    def bind(self, options: EndpointOptions, **sinks: Any) -> QueryController:
        """Create a controller for one input.

        ``sinks`` are passed through to QueryController (read_text, presenter,
        validity, write_field, debouncer).
        """
        cache = self.registry.for_endpoint(options.api)
        return QueryController(options, cache, self.fetcher, **sinks)

    async def lookup(self, options: EndpointOptions, query: str) -> CacheEntry:
        """Return the entry for a query, fetching it on a cache miss.

        Unlike a bound controller this never reuses a covering entry and lets
        FetchError propagate to the caller.
        """
        query = query.strip()
        cache = self.registry.for_endpoint(options.api)
        if cache.contains(query):
            entry = await cache.wait(query)
            if entry is not None:
                return entry

        cache.reserve(query)
        try:
            entry = await self.fetcher.fetch(options, query)
        except BaseException:
            cache.release(query)
            raise
        cache.store(query, entry)
        return entry

    async def aclose(self) -> None:
        await self.fetcher.aclose()
