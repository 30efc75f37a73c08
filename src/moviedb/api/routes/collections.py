"""REST routes for a collection.

GET    /{collection}       - list (fields, searchFields, search, populate, sort, page, pageSize)
GET    /{collection}/{id}  - get (fields, populate)
POST   /{collection}       - create
PUT    /{collection}/{id}  - update
DELETE /{collection}/{id}  - remove

Query string values are passed through as strings; the collection
service splits field lists and coerces numbers.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request

from moviedb.api.app import get_services
from moviedb.core.collection import CollectionService


def build_router(name: str) -> APIRouter:
    """Build the REST router for one collection.

    Args:
        name: Collection name; also the URL prefix.

    Returns:
        Router with list/get/create/update/remove routes.
    """
    router = APIRouter(prefix=f"/{name}", tags=[name])

    def service(services: dict[str, CollectionService] = Depends(get_services)) -> CollectionService:
        return services[name]

    @router.get("")
    def list_entities(request: Request, svc: CollectionService = Depends(service)) -> dict[str, Any]:
        """List one page of entities."""
        return svc.list(dict(request.query_params))

    @router.get("/{entity_id}")
    def get_entity(
        entity_id: str, request: Request, svc: CollectionService = Depends(service)
    ) -> dict[str, Any]:
        """Get one entity."""
        return svc.get({**request.query_params, "id": entity_id})

    @router.post("", status_code=201)
    def create_entity(
        payload: dict[str, Any] = Body(...), svc: CollectionService = Depends(service)
    ) -> dict[str, Any]:
        """Create an entity from the JSON body."""
        return svc.create(payload)

    @router.put("/{entity_id}")
    def update_entity(
        entity_id: str,
        payload: dict[str, Any] = Body(...),
        svc: CollectionService = Depends(service),
    ) -> dict[str, Any]:
        """Replace fields of an entity."""
        return svc.update({**payload, "id": entity_id})

    @router.delete("/{entity_id}")
    def remove_entity(entity_id: str, svc: CollectionService = Depends(service)) -> int:
        """Remove an entity; returns the removed count."""
        return svc.remove({"id": entity_id})

    return router
