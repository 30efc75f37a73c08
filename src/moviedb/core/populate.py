"""Relation population.

Reference fields hold ids of entities in another collection. A
``PopulateDirective`` names the field, the store to resolve ids
against and the sub-fields to keep on each resolved entity.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from moviedb.core.projection import project
from moviedb.db.store import Entity, EntityStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PopulateDirective:
    """How to expand one reference field."""

    field: str
    target: EntityStore
    fields: tuple[str, ...] | None = None


def _reference_ids(entities: Iterable[Entity], field_name: str) -> set[str]:
    ids: set[str] = set()
    for entity in entities:
        value = entity.get(field_name)
        if isinstance(value, list):
            ids.update(str(v) for v in value if v is not None)
        elif value is not None:
            ids.add(str(value))
    return ids


class RelationPopulator:
    """Replaces reference ids with projected entities of the target store.

    One batched lookup is issued per populated field per call. Ids that
    no longer resolve are dropped from arrays; a scalar reference that
    does not resolve becomes None.
    """

    def __init__(self, directives: Iterable[PopulateDirective] = ()):
        self.directives = {d.field: d for d in directives}

    def populate(self, entities: list[Entity], populate_fields: Iterable[str]) -> list[Entity]:
        """Expand requested reference fields.

        Args:
            entities: Entities to expand. Not modified.
            populate_fields: Requested fields. Fields without a directive
                are ignored.

        Returns:
            New entity dicts with reference fields expanded.
        """
        requested = [f for f in dict.fromkeys(populate_fields) if f in self.directives]
        if not requested or not entities:
            return entities

        result = [dict(e) for e in entities]
        for field_name in requested:
            directive = self.directives[field_name]
            found = directive.target.find_by_ids(_reference_ids(result, field_name))
            resolved = {key: project(doc, directive.fields) for key, doc in found.items()}

            for entity in result:
                if field_name not in entity:
                    continue
                value = entity[field_name]
                if isinstance(value, list):
                    entity[field_name] = [resolved[str(v)] for v in value if str(v) in resolved]
                    missing = len(value) - len(entity[field_name])
                    if missing:
                        logger.debug(
                            f"Dropped {missing} unresolved {field_name} reference(s) "
                            f"from {entity.get('_id')}"
                        )
                elif value is not None:
                    entity[field_name] = resolved.get(str(value))

        return result
