"""Schema-driven validation.

Schemas are pydantic models. ``validate`` runs a model over a raw
parameter bag and turns pydantic's error list into violations of the
form ``{"type": kind, "field": name, "message": ..., "actual": ...}``
so callers can match on a small, stable set of kinds:

- ``required``: field absent
- ``string``, ``number``, ``date``, ``array``, ``boolean``: wrong type
  or out of declared bounds for that type
- ``object``: the parameter bag itself is malformed

Range violations (e.g. a rating above 10) are reported with the
type's kind, not a separate one.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, TypeVar

import pydantic
from pydantic import BaseModel

from moviedb.errors import ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

# pydantic error type prefix -> violation kind. First match wins.
_KIND_BY_PREFIX: tuple[tuple[str, str], ...] = (
    ("missing", "required"),
    ("string", "string"),
    ("float", "number"),
    ("int", "number"),
    ("greater_than", "number"),
    ("less_than", "number"),
    ("finite_number", "number"),
    ("multiple_of", "number"),
    ("datetime", "date"),
    ("date", "date"),
    ("list", "array"),
    ("too_short", "array"),
    ("too_long", "array"),
    ("bool", "boolean"),
    ("dict", "object"),
    ("model", "object"),
)


def violation_kind(error_type: str) -> str:
    """Map a pydantic error type to a violation kind.

    Unknown error types are passed through unchanged.
    """
    for prefix, kind in _KIND_BY_PREFIX:
        if error_type.startswith(prefix):
            return kind
    return error_type


def to_violations(exc: pydantic.ValidationError) -> list[dict[str, Any]]:
    """Convert pydantic errors to a de-duplicated violation list.

    Errors inside arrays (``loc == ("genres", 0)``) are reported on the
    array field itself, with the kind of the item type.
    """
    violations: list[dict[str, Any]] = []
    seen: set[tuple[str, str | None]] = set()

    for error in exc.errors():
        loc = error["loc"]
        field = str(loc[0]) if loc else None
        kind = violation_kind(error["type"])

        if (kind, field) in seen:
            continue
        seen.add((kind, field))

        violation: dict[str, Any] = {
            "type": kind,
            "field": field,
            "message": error["msg"],
        }
        if kind != "required":
            violation["actual"] = error.get("input")
        if len(loc) > 1:
            violation["path"] = ".".join(str(part) for part in loc)
        violations.append(violation)

    return violations


def validate(model: type[ModelT], params: Mapping[str, Any] | None) -> ModelT:
    """Validate params against a schema model.

    Args:
        model: Pydantic model declaring the schema.
        params: Raw input.

    Returns:
        The validated, coerced model instance.

    Raises:
        ValidationError: With every violation found, not just the first.
    """
    try:
        return model.model_validate(params if params is not None else {})
    except pydantic.ValidationError as e:
        violations = to_violations(e)
        logger.debug(f"{model.__name__} rejected: {violations}")
        raise ValidationError(violations) from e
