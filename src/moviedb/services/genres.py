"""Genres collection."""

from __future__ import annotations

from sqlalchemy.orm import sessionmaker

from moviedb.core.collection import CollectionService
from moviedb.db.store import EntityStore
from moviedb.models.entities import GenreSchema

NAME = "genres"

FIELDS = ("_id", "title", "description")


def create_genres_service(session_factory: sessionmaker, max_page_size: int = 100) -> CollectionService:
    """Build the genres service over its own store."""
    return CollectionService(
        name=NAME,
        store=EntityStore(session_factory, NAME),
        schema=GenreSchema,
        fields=FIELDS,
        max_page_size=max_page_size,
    )
