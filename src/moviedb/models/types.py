"""Pydantic models for collection operation parameters and results.

Parameter models accept the loose shapes callers send: field lists
may be a list or a comma/space separated string (as they arrive in a
query string), ``query`` may be a dict or its JSON text.
"""

from __future__ import annotations

import json
import re
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field


def _split_names(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [name for name in re.split(r"[,\s]+", value) if name]
    return value


def _parse_query(value: Any) -> Any:
    if isinstance(value, str):
        if not value.strip():
            return None
        return json.loads(value)
    return value


FieldNames = Annotated[list[str], BeforeValidator(_split_names)]
QueryFilter = Annotated[dict[str, Any] | None, BeforeValidator(_parse_query)]
EntityId = str | int


class OperationParams(BaseModel):
    """Base for operation parameter bags; unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class IdParams(OperationParams):
    """Parameters of ``remove`` and ``update``."""

    id: EntityId


class GetParams(OperationParams):
    """Parameters of ``get``."""

    id: EntityId
    fields: FieldNames = Field(default_factory=list)
    populate: FieldNames = Field(default_factory=list)


class FindParams(OperationParams):
    """Parameters of ``find``."""

    fields: FieldNames = Field(default_factory=list)
    populate: FieldNames = Field(default_factory=list)
    search: str | None = None
    search_fields: FieldNames = Field(default_factory=list, alias="searchFields")
    sort: FieldNames = Field(default_factory=list)
    query: QueryFilter = None
    limit: int | None = Field(default=None, ge=0)
    offset: int = Field(default=0, ge=0)


class CountParams(OperationParams):
    """Parameters of ``count``."""

    search: str | None = None
    search_fields: FieldNames = Field(default_factory=list, alias="searchFields")
    query: QueryFilter = None


class ListParams(OperationParams):
    """Parameters of ``list``.

    ``fields`` and ``searchFields`` must be present, though either may
    be empty.
    """

    fields: FieldNames
    search_fields: FieldNames = Field(alias="searchFields")
    populate: FieldNames = Field(default_factory=list)
    search: str | None = None
    sort: FieldNames = Field(default_factory=list)
    query: QueryFilter = None
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=10, ge=1, alias="pageSize")


class ListResult(BaseModel):
    """One page of a ``list`` call."""

    model_config = ConfigDict(populate_by_name=True)

    rows: list[dict[str, Any]]
    total: int
    page: int
    page_size: int = Field(alias="pageSize")
    total_pages: int = Field(alias="totalPages")

    def to_dict(self) -> dict[str, Any]:
        """Serialize with camelCase keys."""
        return self.model_dump(by_alias=True)
