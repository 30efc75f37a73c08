"""Movies collection.

``genres`` holds genre ids and can be populated with each genre's
``title`` and ``_id``.
"""

from __future__ import annotations

from sqlalchemy.orm import sessionmaker

from moviedb.core.collection import CollectionService
from moviedb.core.populate import PopulateDirective, RelationPopulator
from moviedb.db.store import EntityStore
from moviedb.models.entities import MovieSchema

NAME = "movies"

FIELDS = ("_id", "name", "description", "releaseDate", "duration", "rating", "genres")

GENRE_FIELDS = ("title", "_id")


def create_movies_service(
    session_factory: sessionmaker,
    genres: CollectionService,
    max_page_size: int = 100,
) -> CollectionService:
    """Build the movies service.

    Args:
        session_factory: Factory for database sessions.
        genres: Genres service whose store resolves ``genres`` references.
        max_page_size: Upper bound for ``list`` page sizes.
    """
    populator = RelationPopulator(
        [PopulateDirective(field="genres", target=genres.store, fields=GENRE_FIELDS)]
    )
    return CollectionService(
        name=NAME,
        store=EntityStore(session_factory, NAME),
        schema=MovieSchema,
        fields=FIELDS,
        populator=populator,
        max_page_size=max_page_size,
    )
