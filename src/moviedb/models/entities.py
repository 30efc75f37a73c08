"""Entity schemas.

Each model declares the fields a collection accepts on create and
update. Unknown input keys are dropped. ``_id`` is optional; the store
generates one when it is absent or empty.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EntitySchema(BaseModel):
    """Base for entity schemas."""

    model_config = ConfigDict(extra="ignore")

    id: str | int | None = Field(default=None, alias="_id")

    def to_document(self) -> dict[str, Any]:
        """Dump the fields that were provided, JSON-ready.

        Dates become ISO-8601 strings; ``_id`` is left out when unset.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class GenreSchema(EntitySchema):
    """A genre."""

    title: str
    description: str | None = None


class MovieSchema(EntitySchema):
    """A movie; ``genres`` holds genre ids."""

    name: str
    description: str | None = None
    release_date: datetime | None = Field(default=None, alias="releaseDate")
    duration: float | None = Field(default=None, ge=0, le=500, strict=True)
    rating: float | None = Field(default=None, ge=0, le=10, strict=True)
    genres: list[str] | None = None
