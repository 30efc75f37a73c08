"""Field projection."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


def project(entity: dict[str, Any], fields: Sequence[str] | None) -> dict[str, Any]:
    """Keep only the named fields of entity, in the order given.

    ``None`` keeps everything. Fields absent from the entity are
    skipped rather than set to None.
    """
    if fields is None:
        return dict(entity)
    return {name: entity[name] for name in fields if name in entity}


def authorize_fields(requested: Sequence[str], allowed: Sequence[str]) -> list[str]:
    """Restrict requested fields to the collection's allowed fields.

    An empty request means all allowed fields.
    """
    if not requested:
        return list(allowed)
    return [name for name in requested if name in allowed]
