"""Remote fetcher — queries an endpoint and parses the reply into a CacheEntry."""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable

import httpx

from fieldsuggest import __version__
from fieldsuggest.core.exceptions import FetchError
from fieldsuggest.models.candidates import CacheEntry, field_text
from fieldsuggest.models.options import EndpointOptions

logger = logging.getLogger(__name__)

# async (url) -> decoded JSON body
Requester = Callable[[str], Awaitable[Any]]


def get_user_agent(contact: str = "") -> str:
    """Build the User-Agent sent with every suggestion request."""
    base = f"fieldsuggest/{__version__}"
    return base + (f" (+{contact})" if contact else "")


class HttpRequester:
    """Default network capability backed by an httpx.AsyncClient.

    The client is created lazily and reused; pass one in to share a
    connection pool or to plug in a mock transport.
    """

    def __init__(
        self,
        client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
        user_agent: str | None = None,
    ) -> None:
        self._client = client
        self._owns_client = client is None
        self.timeout = timeout
        self.user_agent = user_agent or get_user_agent()

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers={"User-Agent": self.user_agent, "Accept": "application/json"},
                follow_redirects=True,
            )
        return self._client

    async def __call__(self, url: str) -> Any:
        logger.info("Fetching suggestions from %s", url)
        try:
            response = await self._get_client().get(url)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise FetchError(f"Request failed for {url}: {e}", url=url) from e

        if not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError as e:
            raise FetchError(f"Invalid JSON from {url}: {e}", url=url) from e

    async def aclose(self) -> None:
        """Close the client if this requester created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None


def extract_records(body: Any, result_field: str | None = None) -> list[Any]:
    """Normalize a decoded body into the list of candidate records."""
    if not body:
        return []
    if result_field and isinstance(body, dict) and result_field in body:
        body = body[result_field] or []
    return body if isinstance(body, list) else [body]


def build_entry(query: str, body: Any, options: EndpointOptions) -> CacheEntry:
    """Parse a decoded body into a CacheEntry for ``query``.

    Every record is kept in ``data``. Display values are collected in order,
    skipping records without one and duplicates, until ``max_candidates`` are
    held. The entry is complete when the usable records fit within the limit.
    """
    records = extract_records(body, options.result_field)
    key = options.display_key

    candidates: list[str] = []
    usable = 0
    for record in records:
        value = field_text(record, key)
        if not value:
            continue
        usable += 1
        if len(candidates) < options.max_candidates and value not in candidates:
            candidates.append(value)

    return CacheEntry(
        query=query,
        data=records,
        candidates=candidates,
        complete=usable <= options.max_candidates,
    )


class RemoteFetcher:
    """Issues one request per query and builds its CacheEntry."""

    def __init__(self, requester: Requester | None = None) -> None:
        self.requester = requester or HttpRequester()

    async def fetch(self, options: EndpointOptions, query: str) -> CacheEntry:
        """Fetch and parse suggestions for ``query``.

        Raises FetchError on network failure or an undecodable body.
        """
        url = options.build_url(query)
        try:
            body = await self.requester(url)
        except FetchError:
            raise
        except Exception as e:
            raise FetchError(f"Request failed for {url}: {e}", url=url) from e

        entry = build_entry(query, body, options)
        logger.debug(
            "Fetched %d records for %r (%d candidates, complete=%s)",
            len(entry.data), query, len(entry.candidates), entry.complete,
        )
        return entry

    async def aclose(self) -> None:
        close = getattr(self.requester, "aclose", None)
        if close is not None:
            await close()
