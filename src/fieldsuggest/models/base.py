"""Base model for fieldsuggest."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class SuggestModel(BaseModel):
    """Base for all fieldsuggest Pydantic models."""

    model_config = ConfigDict(extra="ignore")

    def to_dict(self) -> dict[str, Any]:
        """Convert model to a plain dict suitable for JSON or TOML output."""
        return self.model_dump(exclude_none=True)
