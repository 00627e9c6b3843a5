"""Shared base for models parsed straight from the parking feed.

Feed keys are camelCase (``numberOfSpots``); fields are snake_case and
map through ``to_camel``. Placeholder values are removed before
validation so optional fields fall back to their defaults, and the
untouched payload is kept on ``raw`` for debugging.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from parkzones.ingestion.normalize import is_sentinel


class FeedBaseModel(BaseModel):
    """Frozen feed model tolerant of unknown keys and placeholder values."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    raw: dict[str, Any] = Field(default_factory=dict)
    """Feed entry as received."""

    @model_validator(mode="before")
    @classmethod
    def _drop_placeholders(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        present = {key: value for key, value in data.items() if not is_sentinel(value)}
        present.setdefault("raw", dict(data))
        return present
