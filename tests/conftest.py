"""Shared pytest fixtures for moviedb tests."""

from datetime import datetime, timezone

import pytest

from moviedb.db.session import create_memory_engine, make_session_factory
from moviedb.services import build_services

GENRES = [
    {"_id": "1", "title": "Romantic", "description": "Romantic description"},
    {"_id": "2", "title": "Drama", "description": "Drama description"},
    {"_id": "3", "title": "Action", "description": "Action description"},
    {"_id": "4", "title": "Thriller", "description": "Thriller description"},
]


def _movies():
    released = datetime.now(timezone.utc)
    return [
        {"_id": "1", "name": "movieName", "description": "Movie description", "duration": 5, "rating": 8, "releaseDate": released, "genres": ["1", "2", "3"]},
        {"_id": "2", "name": "movieName2", "description": "Movie description2", "duration": 6, "rating": 4, "releaseDate": released, "genres": ["4"]},
        {"_id": "3", "name": "movieName3", "description": "Movie description3", "duration": 7, "rating": 3, "releaseDate": released, "genres": ["4", "1"]},
        {"_id": "4", "name": "movieName4", "description": "Movie description4", "duration": 8, "rating": 5, "releaseDate": released, "genres": ["2"]},
        {"_id": "5", "name": "movieName5", "description": "Movie description5", "duration": 9, "rating": 6, "releaseDate": released, "genres": ["3", "1"]},
    ]


def seed_db(services) -> None:
    """Create the standard four genres and five movies."""
    for genre in GENRES:
        services["genres"].create(genre)
    for movie in _movies():
        services["movies"].create(movie)


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing."""
    return create_memory_engine()


@pytest.fixture
def session_factory(engine):
    """Create a session factory bound to the test engine."""
    return make_session_factory(engine)


@pytest.fixture
def services(session_factory):
    """Wired collection services over an empty database."""
    return build_services(session_factory)


@pytest.fixture
def genres(services):
    return services["genres"]


@pytest.fixture
def movies(services):
    return services["movies"]


@pytest.fixture
def seeded(services):
    """Collection services over the seeded database."""
    seed_db(services)
    return services


@pytest.fixture
def client(engine):
    """TestClient for an app over the test engine."""
    from fastapi.testclient import TestClient

    from moviedb.api.app import create_app

    app = create_app(engine=engine)
    return TestClient(app)


@pytest.fixture
def seeded_client(client):
    """TestClient over the seeded database."""
    seed_db(client.app.state.services)
    return client
