"""Collection services and their wiring."""

from __future__ import annotations

from sqlalchemy.orm import sessionmaker

from moviedb.core.collection import CollectionService
from moviedb.services.genres import create_genres_service
from moviedb.services.movies import create_movies_service


def build_services(session_factory: sessionmaker, max_page_size: int = 100) -> dict[str, CollectionService]:
    """Create every collection service, keyed by collection name.

    Genres are built first since movies resolve references against them.
    """
    genres = create_genres_service(session_factory, max_page_size)
    movies = create_movies_service(session_factory, genres, max_page_size)
    return {genres.name: genres, movies.name: movies}


__all__ = ["build_services", "create_genres_service", "create_movies_service"]
