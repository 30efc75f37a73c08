"""Generic collection service.

A ``CollectionService`` composes an ``EntityStore``, an entity schema
and a ``RelationPopulator`` into the CRUD contract shared by every
collection. Collaborators are passed in at construction; nothing is
looked up at call time.

Every operation takes a raw parameter bag (a mapping, as it arrives
from a caller or the HTTP layer) and either returns a result or raises
a ``ServiceError``:

- ``ValidationError`` (422) for malformed parameters or entities
- ``EntityNotFoundError`` (404) for unknown ids
- ``EntityConflictError`` (409) for duplicate ids on create
"""

from __future__ import annotations

import logging
import math
from collections.abc import Mapping, Sequence
from typing import Any

from moviedb.core.populate import RelationPopulator
from moviedb.core.projection import authorize_fields, project
from moviedb.core.validation import validate
from moviedb.db.store import Entity, EntityStore
from moviedb.models.entities import EntitySchema
from moviedb.models.types import (
    CountParams,
    FindParams,
    GetParams,
    IdParams,
    ListParams,
    ListResult,
)

logger = logging.getLogger(__name__)

Params = Mapping[str, Any] | None


class CollectionService:
    """CRUD operations over one named collection."""

    def __init__(
        self,
        name: str,
        store: EntityStore,
        schema: type[EntitySchema],
        fields: Sequence[str],
        populator: RelationPopulator | None = None,
        max_page_size: int = 100,
    ):
        """Initialize service.

        Args:
            name: Collection name, used in logs and routes.
            store: Store holding this collection's entities.
            schema: Entity schema enforced on create and update.
            fields: Fields returned when a caller requests no projection.
                Requested projections are limited to these.
            populator: Expands reference fields on get/list/find.
            max_page_size: Upper bound for ``list`` page sizes.
        """
        self.name = name
        self.store = store
        self.schema = schema
        self.fields = tuple(fields)
        self.populator = populator or RelationPopulator()
        self.max_page_size = max_page_size

    def _transform(
        self,
        entities: list[Entity],
        fields: Sequence[str] = (),
        populate: Sequence[str] = (),
    ) -> list[Entity]:
        """Populate references, then project to the authorized fields."""
        if populate:
            entities = self.populator.populate(entities, populate)
        allowed = authorize_fields(fields, self.fields)
        return [project(e, allowed) for e in entities]

    def create(self, params: Params) -> Entity:
        """Validate and insert a new entity.

        Returns:
            The stored entity, projected to the default fields.
        """
        entity = validate(self.schema, params)
        stored = self.store.create(entity.to_document())
        return self._transform([stored])[0]

    def get(self, params: Params) -> Entity:
        """Get one entity by ``id`` with optional ``fields`` and ``populate``."""
        p = validate(GetParams, params)
        entity = self.store.get(p.id)
        return self._transform([entity], p.fields, p.populate)[0]

    def find(self, params: Params = None) -> list[Entity]:
        """Find entities with filters, sort and ``limit``/``offset``."""
        p = validate(FindParams, params)
        rows = self.store.find(
            query=p.query,
            search=p.search,
            search_fields=p.search_fields,
            sort=p.sort,
            limit=p.limit,
            offset=p.offset,
        )
        return self._transform(rows, p.fields, p.populate)

    def count(self, params: Params = None) -> int:
        """Count entities matching ``query`` and ``search``."""
        p = validate(CountParams, params)
        return self.store.count(query=p.query, search=p.search, search_fields=p.search_fields)

    def list(self, params: Params) -> dict[str, Any]:
        """List one page of entities.

        ``fields`` and ``searchFields`` are required. ``total`` counts
        every matching entity, not just the returned page.

        Returns:
            Dict with rows, total, page, pageSize and totalPages.
        """
        p = validate(ListParams, params)
        page_size = min(p.page_size, self.max_page_size)

        rows, total = self.store.find_page(
            query=p.query,
            search=p.search,
            search_fields=p.search_fields,
            sort=p.sort,
            limit=page_size,
            offset=(p.page - 1) * page_size,
        )
        logger.debug(f"{self.name}.list page {p.page}: {len(rows)} of {total}")

        return ListResult(
            rows=self._transform(rows, p.fields, p.populate),
            total=total,
            page=p.page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size),
        ).to_dict()

    def update(self, params: Params) -> Entity:
        """Replace fields of an existing entity.

        Every parameter other than ``id`` is a field change. The merged
        entity is validated against the schema before anything is
        written, so a stored entity always satisfies it.
        """
        p = validate(IdParams, params)
        changes = {k: v for k, v in params.items() if k not in ("id", "_id")}

        current = self.store.get(p.id)
        document = validate(self.schema, {**current, **changes}).to_document()
        accepted = {k: document[k] for k in changes if k in document}
        if not accepted:
            return self._transform([current])[0]

        updated = self.store.update(p.id, accepted)
        return self._transform([updated])[0]

    def remove(self, params: Params) -> int:
        """Delete an entity by ``id``.

        Returns:
            Number of removed entities (1).
        """
        p = validate(IdParams, params)
        return self.store.remove(p.id)
