"""Document store for a single named collection.

Encapsulates all SQLAlchemy queries against the ``documents`` table.
Entities go in and come out as plain dicts; the store does not know
about schemas, projections or populates.

Each operation runs in its own session (commit on success, rollback on
error), so a single create/update/remove is atomic. The unique
``(collection, doc_id)`` constraint rejects concurrent inserts of the
same id.
"""

from __future__ import annotations

import json
import logging
import uuid
from collections.abc import Iterable
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from moviedb.db.schema import Document
from moviedb.db.session import session_scope
from moviedb.errors import EntityConflictError, EntityNotFoundError

logger = logging.getLogger(__name__)

Entity = dict[str, Any]


def generate_id() -> str:
    """Generate a fresh entity id."""
    return uuid.uuid4().hex


def _as_text(value: Any) -> str:
    """Render a stored value as text for substring search."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, list):
        return ",".join(_as_text(v) for v in value)
    if isinstance(value, dict):
        return json.dumps(value, sort_keys=True)
    return str(value)


def matches_search(entity: Entity, search: str, search_fields: list[str] | None) -> bool:
    """Check whether any searched field contains search (case-insensitive).

    An empty ``search_fields`` searches every field of the entity.
    """
    needle = search.lower()
    if search_fields:
        values = [entity[f] for f in search_fields if f in entity]
    else:
        values = list(entity.values())
    return any(needle in _as_text(v).lower() for v in values)


def matches_query(entity: Entity, query: dict[str, Any] | None) -> bool:
    """Check equality of every queried field."""
    if not query:
        return True
    for field, expected in query.items():
        if field == "_id":
            if str(entity.get("_id")) != str(expected):
                return False
        elif entity.get(field) != expected:
            return False
    return True


def _sort_key(value: Any) -> tuple[int, Any]:
    # Numbers before strings, missing values last
    if value is None:
        return (2, "")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value)
    return (1, _as_text(value))


def sort_entities(entities: list[Entity], sort: list[str] | None) -> list[Entity]:
    """Sort entities by fields; a leading "-" sorts a field descending.

    Sorting is stable, so entities with equal keys keep insertion order.
    """
    result = list(entities)
    for spec in reversed(sort or []):
        descending = spec.startswith("-")
        field = spec[1:] if descending else spec
        result.sort(key=lambda e: _sort_key(e.get(field)), reverse=descending)
    return result


class EntityStore:
    """CRUD, search and pagination over one collection."""

    def __init__(self, session_factory: sessionmaker, collection: str):
        """Initialize store.

        Args:
            session_factory: Factory for database sessions.
            collection: Collection name; entities of other collections
                are never visible to this store.
        """
        self.session_factory = session_factory
        self.collection = collection

    def _documents(self, session: Session):
        return session.query(Document).filter(Document.collection == self.collection)

    def _load_all(self) -> list[Entity]:
        with session_scope(self.session_factory) as session:
            docs = self._documents(session).order_by(Document.seq).all()
            return [dict(doc.body) for doc in docs]

    def create(self, fields: Entity) -> Entity:
        """Insert a new entity.

        Args:
            fields: Entity fields. ``_id`` is generated when missing or empty.

        Returns:
            The stored entity.

        Raises:
            EntityConflictError: If the id already exists in the collection.
        """
        entity_id = fields.get("_id")
        if entity_id is None or entity_id == "":
            entity_id = generate_id()
        body = {**fields, "_id": entity_id}

        with session_scope(self.session_factory) as session:
            exists = self._documents(session).filter(Document.doc_id == str(entity_id)).first()
            if exists is not None:
                raise EntityConflictError(entity_id)
            session.add(Document(collection=self.collection, doc_id=str(entity_id), body=body))
            try:
                session.flush()
            except IntegrityError as e:
                raise EntityConflictError(entity_id) from e

        logger.info(f"Created {self.collection} entity {entity_id}")
        return dict(body)

    def get(self, entity_id: Any) -> Entity:
        """Get entity by id.

        Raises:
            EntityNotFoundError: If no entity has that id.
        """
        with session_scope(self.session_factory) as session:
            doc = self._documents(session).filter(Document.doc_id == str(entity_id)).first()
            if doc is None:
                raise EntityNotFoundError(entity_id)
            return dict(doc.body)

    def find_by_ids(self, ids: Iterable[Any]) -> dict[str, Entity]:
        """Get entities by id in one query.

        Returns:
            Mapping of string id to entity. Missing ids are absent.
        """
        keys = {str(i) for i in ids}
        if not keys:
            return {}
        with session_scope(self.session_factory) as session:
            docs = self._documents(session).filter(Document.doc_id.in_(keys)).all()
            return {doc.doc_id: dict(doc.body) for doc in docs}

    def _filtered(
        self,
        query: dict[str, Any] | None,
        search: str | None,
        search_fields: list[str] | None,
    ) -> list[Entity]:
        entities = [e for e in self._load_all() if matches_query(e, query)]
        if search:
            entities = [e for e in entities if matches_search(e, search, search_fields)]
        return entities

    def find(
        self,
        *,
        query: dict[str, Any] | None = None,
        search: str | None = None,
        search_fields: list[str] | None = None,
        sort: list[str] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> list[Entity]:
        """Find entities.

        Filtering is applied first (equality ``query``, then substring
        ``search``), then ``sort``, then ``offset``/``limit``. Without a
        sort, entities come back in insertion order.
        """
        rows, _ = self.find_page(
            query=query,
            search=search,
            search_fields=search_fields,
            sort=sort,
            limit=limit,
            offset=offset,
        )
        return rows

    def find_page(
        self,
        *,
        query: dict[str, Any] | None = None,
        search: str | None = None,
        search_fields: list[str] | None = None,
        sort: list[str] | None = None,
        limit: int | None = None,
        offset: int = 0,
    ) -> tuple[list[Entity], int]:
        """Find one page of entities and the total number of matches.

        Rows and total come from the same read of the collection, so
        they always agree.

        Returns:
            Tuple of (rows, total).
        """
        matched = self._filtered(query, search, search_fields)
        entities = sort_entities(matched, sort)
        if offset:
            entities = entities[offset:]
        if limit is not None:
            entities = entities[:limit]
        return entities, len(matched)

    def count(
        self,
        *,
        query: dict[str, Any] | None = None,
        search: str | None = None,
        search_fields: list[str] | None = None,
    ) -> int:
        """Count entities matching the filters, ignoring pagination."""
        return len(self._filtered(query, search, search_fields))

    def update(self, entity_id: Any, fields: Entity) -> Entity:
        """Replace the given fields of an existing entity.

        ``_id`` cannot be changed and is ignored in ``fields``.

        Raises:
            EntityNotFoundError: If no entity has that id.
        """
        changes = {k: v for k, v in fields.items() if k != "_id"}
        with session_scope(self.session_factory) as session:
            doc = self._documents(session).filter(Document.doc_id == str(entity_id)).first()
            if doc is None:
                raise EntityNotFoundError(entity_id)
            # Assign a new dict so the JSON column is flagged dirty
            doc.body = {**doc.body, **changes}
            body = dict(doc.body)

        logger.info(f"Updated {self.collection} entity {entity_id}: {sorted(changes)}")
        return body

    def remove(self, entity_id: Any) -> int:
        """Delete entity by id.

        Returns:
            Number of removed entities (always 1).

        Raises:
            EntityNotFoundError: If no entity has that id.
        """
        with session_scope(self.session_factory) as session:
            deleted = (
                self._documents(session)
                .filter(Document.doc_id == str(entity_id))
                .delete(synchronize_session=False)
            )
            if deleted == 0:
                raise EntityNotFoundError(entity_id)

        logger.info(f"Removed {self.collection} entity {entity_id}")
        return deleted

    def clear(self) -> int:
        """Delete every entity of the collection.

        Returns:
            Number of removed entities.
        """
        with session_scope(self.session_factory) as session:
            deleted = self._documents(session).delete(synchronize_session=False)

        logger.info(f"Cleared {deleted} {self.collection} entities")
        return deleted
