"""Service errors for moviedb.

Errors carry an HTTP-equivalent ``code``, a machine-readable ``type``
and an optional ``data`` payload. The API layer translates them into
JSON responses; in-process callers catch them directly.
"""

from __future__ import annotations

from typing import Any


class ServiceError(Exception):
    """Base class for errors raised by collection operations."""

    code: int = 500
    type: str = "SERVICE_ERROR"

    def __init__(self, message: str, data: Any = None):
        super().__init__(message)
        self.message = message
        self.data = data

    def to_dict(self) -> dict[str, Any]:
        """Serialize error for API responses."""
        return {
            "name": type(self).__name__,
            "message": self.message,
            "code": self.code,
            "type": self.type,
            "data": self.data,
        }


class ValidationError(ServiceError):
    """Input failed schema validation.

    ``data`` is the list of violations, each a dict with at least
    ``type`` (violation kind) and ``field``.
    """

    code = 422
    type = "VALIDATION_ERROR"

    def __init__(self, violations: list[dict[str, Any]], message: str = "Parameters validation error!"):
        super().__init__(message, violations)

    @property
    def violations(self) -> list[dict[str, Any]]:
        return self.data


class EntityNotFoundError(ServiceError):
    """No entity with the given id exists in the collection."""

    code = 404
    type = "NOT_FOUND"

    def __init__(self, entity_id: Any):
        super().__init__("Entity not found", {"id": entity_id})


class EntityConflictError(ServiceError):
    """An entity with the given id already exists in the collection."""

    code = 409
    type = "ALREADY_EXISTS"

    def __init__(self, entity_id: Any):
        super().__init__("Entity already exists", {"id": entity_id})
