"""Endpoint options — the configuration of one bound input."""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import quote

from pydantic import Field, field_validator, model_validator

from fieldsuggest.core.exceptions import TemplateError
from fieldsuggest.models.base import SuggestModel

PLACEHOLDER_RE = re.compile(r"\$\{([^}]*)\}")

DEFAULT_MIN_QUERY_LENGTH = 1
DEFAULT_MAX_CANDIDATES = 20
DEFAULT_DEBOUNCE_DELAY = 0.5


def placeholder_name(template: str) -> str:
    """Return the name inside the single ``${name}`` placeholder of a template.

    Raises TemplateError if the template holds no placeholder, more than one,
    or an empty one.
    """
    matches = PLACEHOLDER_RE.findall(template)
    if len(matches) != 1:
        raise TemplateError(
            f"Endpoint template must contain exactly one ${{...}} placeholder: {template!r}"
        )
    name = matches[0].strip()
    if not name:
        raise TemplateError(f"Endpoint template placeholder is empty: {template!r}")
    return name


class DependentField(SuggestModel):
    """A form field filled from the matching record.

    ``source`` is the record field to read; it defaults to the field's own name.
    """

    name: str
    source: str = ""

    @model_validator(mode="after")
    def _default_source(self) -> "DependentField":
        if not self.source:
            self.source = self.name
        return self


class EndpointOptions(SuggestModel):
    """Validated settings for one autocomplete-bound input."""

    api: str
    min_query_length: int = Field(default=DEFAULT_MIN_QUERY_LENGTH, ge=0)
    max_candidates: int = Field(default=DEFAULT_MAX_CANDIDATES, gt=0)
    display_field: str | None = None
    result_field: str | None = None
    valid: str | None = None  # validity error message; None disables reporting
    debounce_delay: float = Field(default=DEFAULT_DEBOUNCE_DELAY, ge=0)
    fields: list[DependentField] = Field(default_factory=list)

    @field_validator("api")
    @classmethod
    def _check_template(cls, value: str) -> str:
        placeholder_name(value)
        return value

    @field_validator("fields", mode="before")
    @classmethod
    def _fields_from_mapping(cls, value: Any) -> Any:
        # TOML config stores dependent fields as a {name = source} table
        if isinstance(value, dict):
            return [{"name": k, "source": v} for k, v in value.items()]
        return value

    @property
    def query_name(self) -> str:
        """Name of the primary input, taken from the template placeholder."""
        return placeholder_name(self.api)

    @property
    def display_key(self) -> str:
        """Record field shown to the user; defaults to the placeholder name."""
        return self.display_field or self.query_name

    def build_url(self, query: str) -> str:
        """Substitute the URL-quoted query into the template placeholder."""
        return PLACEHOLDER_RE.sub(lambda _m: quote(query, safe=""), self.api, count=1)

    def to_config(self) -> dict[str, Any]:
        """Serialize for the ``[endpoints.<name>]`` TOML table."""
        data = self.model_dump(exclude_none=True, exclude_unset=True)
        data["fields"] = {f.name: f.source for f in self.fields}
        if not data["fields"]:
            del data["fields"]
        return data
