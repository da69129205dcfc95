"""Query controller — decides between fetching and reusing results for one input.

The controller is UI agnostic. It reads the input through ``read_text`` and
pushes its results to three optional sinks: a presentation sink for the
suggestion list, a validity sink for the "not an accepted value" message, and
a field writer for dependent fields.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Protocol

from fieldsuggest.core.exceptions import FetchError
from fieldsuggest.models.candidates import CacheEntry, field_text
from fieldsuggest.models.options import EndpointOptions
from fieldsuggest.services.debouncer import Debouncer
from fieldsuggest.services.endpoint_cache import EndpointCache
from fieldsuggest.services.fetcher import RemoteFetcher

logger = logging.getLogger(__name__)


class PresentationSink(Protocol):
    def present(self, candidates: list[str]) -> None: ...

    def clear(self) -> None: ...


class ValiditySink(Protocol):
    def report(self, valid: bool, message: str) -> None: ...


FieldWriter = Callable[[str, str], None]


class ControllerState(str, Enum):
    """Lifecycle of the bound input."""

    idle = "idle"
    pending = "pending"
    resolving = "resolving"
    presenting = "presenting"
    detached = "detached"


class QueryController:
    """Drives suggestions, validity and field propagation for one input."""

    def __init__(
        self,
        options: EndpointOptions,
        cache: EndpointCache,
        fetcher: RemoteFetcher,
        *,
        read_text: Callable[[], str] | None = None,
        presenter: PresentationSink | None = None,
        validity: ValiditySink | None = None,
        write_field: FieldWriter | None = None,
        debouncer: Debouncer | None = None,
    ) -> None:
        self.options = options
        self.cache = cache
        self.fetcher = fetcher
        self.presenter = presenter
        self.validity = validity
        self.write_field = write_field
        self.debouncer = debouncer or Debouncer(options.debounce_delay)
        self._read_text = read_text
        self._text = ""
        self._generation = 0
        self.state = ControllerState.idle
        self.last_served_query: str | None = None
        self.presented: list[str] = []

    # ── Input events ─────────────────────────────────────────────

    @property
    def text(self) -> str:
        """Current trimmed input text."""
        raw = self._read_text() if self._read_text is not None else self._text
        return (raw or "").strip()

    @property
    def detached(self) -> bool:
        return self.state is ControllerState.detached

    def on_input(self, raw_text: str) -> None:
        """Handle a text change: clear below the minimum, otherwise debounce."""
        if self.detached:
            return
        self._text = raw_text
        query = raw_text.strip()

        if len(query) < self.options.min_query_length:
            self.debouncer.cancel()
            self._generation += 1
            self.last_served_query = None
            self._clear_presentation()
            self.state = ControllerState.idle
            self.check_validity()
            self.propagate()
            return

        self.state = ControllerState.pending
        self.debouncer.schedule(lambda: self.on_settled(query))

    def on_blur(self) -> bool:
        """Handle focus loss: report whether the input holds an accepted value."""
        if self.detached:
            return False
        return self.check_validity()

    async def on_settled(self, query: str) -> None:
        """Serve a settled query from the cache, a covering entry, or the network."""
        if self.detached:
            return
        query = query.strip()
        self._generation += 1
        generation = self._generation

        if self.cache.contains(query):
            if self.cache.is_pending(query):
                self.state = ControllerState.resolving
            logger.debug("Cache hit for %r", query)
            entry = await self.cache.wait(query)
        elif self._served_entry_covers(query):
            # Narrowing an exhaustive result set: the presented candidates
            # already hold every match, so keep serving them.
            logger.debug("Reusing %r for narrower query %r", self.last_served_query, query)
            if self._is_current(generation):
                self._present(self.cache.get(self.last_served_query))
                self._settle_done()
            return
        else:
            entry = await self._fetch(query)

        if not self._is_current(generation):
            logger.debug("Dropping stale result for %r", query)
            return

        if entry is not None:
            self.last_served_query = query
            self._present(entry)
        else:
            self.state = ControllerState.presenting if self.presented else ControllerState.idle
        self._settle_done()

    async def flush(self) -> None:
        """Settle any debounced input immediately and wait for running settles."""
        if self.debouncer.pending and not self.detached:
            self.debouncer.cancel()
            await self.on_settled(self.text)
        await self.debouncer.drain()

    def detach(self) -> None:
        """Stop reacting to input. In-flight fetches still fill the cache."""
        self.debouncer.cancel()
        self.state = ControllerState.detached

    def clear_cache(self) -> None:
        """Drop cached results for this endpoint and reset the presentation."""
        self.cache.clear()
        if self.detached:
            return
        self._generation += 1
        self.last_served_query = None
        self._clear_presentation()
        self.state = ControllerState.idle
        self.propagate()

    # ── Validity and propagation ─────────────────────────────────

    def valid_value(self) -> dict | None:
        """Return the served record whose display value equals the input exactly."""
        text = self.text
        if not text or self.last_served_query is None:
            return None
        entry = self.cache.get(self.last_served_query)
        if entry is None:
            return None
        return entry.find(text, self.options.display_key)

    def check_validity(self) -> bool:
        """Evaluate validity and report it when a validity message is configured."""
        valid = self.valid_value() is not None
        if self.options.valid and self.validity is not None and not self.detached:
            self.validity.report(valid, "" if valid else self.options.valid)
        return valid

    def propagate(self) -> None:
        """Write the matched record's fields into the dependent fields."""
        if self.write_field is None or self.detached:
            return
        record = self.valid_value()
        for field in self.options.fields:
            self.write_field(field.name, field_text(record, field.source) if record else "")

    # ── Internals ────────────────────────────────────────────────

    def _is_current(self, generation: int) -> bool:
        return not self.detached and generation == self._generation

    def _served_entry_covers(self, query: str) -> bool:
        if self.last_served_query is None:
            return False
        entry = self.cache.get(self.last_served_query)
        return entry is not None and entry.covers(query)

    async def _fetch(self, query: str) -> CacheEntry | None:
        self.cache.reserve(query)
        self.state = ControllerState.resolving
        try:
            entry = await self.fetcher.fetch(self.options, query)
        except FetchError as e:
            self.cache.release(query)
            logger.warning("Suggestion fetch failed for %r: %s", query, e)
            return None
        except BaseException:
            self.cache.release(query)
            raise
        self.cache.store(query, entry)
        return entry

    def _present(self, entry: CacheEntry | None) -> None:
        if entry is None:
            return
        self.presented = list(entry.candidates)
        self.state = ControllerState.presenting
        if self.presenter is not None:
            self.presenter.present(list(self.presented))

    def _clear_presentation(self) -> None:
        self.presented = []
        if self.presenter is not None:
            self.presenter.clear()

    def _settle_done(self) -> None:
        self.check_validity()
        self.propagate()
