"""Candidate sets — the parsed result of one endpoint query."""

from __future__ import annotations

from typing import Any

from pydantic import Field

from fieldsuggest.models.base import SuggestModel


def field_text(record: Any, key: str) -> str:
    """Return a record field as a string, or "" if the record has no value for it."""
    if not isinstance(record, dict):
        return ""
    value = record.get(key)
    if value is None or value == "":
        return ""
    return str(value)


class CacheEntry(SuggestModel):
    """Records returned for one query plus the derived candidate list.

    ``data`` keeps every record the endpoint returned; ``candidates`` holds the
    distinct display values, truncated to the configured maximum. ``complete``
    means the result set was not truncated, so any narrower query is already
    covered by it.
    """

    query: str
    data: list[Any] = Field(default_factory=list)
    candidates: list[str] = Field(default_factory=list)
    complete: bool = True

    def find(self, value: str, key: str) -> dict[str, Any] | None:
        """Return the first record whose display value equals ``value`` exactly."""
        if not value:
            return None
        for record in self.data:
            if field_text(record, key) == value:
                return record
        return None

    def covers(self, query: str) -> bool:
        """True if this exhaustive entry already holds every match for ``query``."""
        return self.complete and query.lower().startswith(self.query.lower())
