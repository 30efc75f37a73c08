#!/usr/bin/env python3
"""Seed demo genres and movies.

Usage:
    python scripts/seed_demo.py [--reset]

Writes to the database at MOVIEDB_DB_PATH (default data/moviedb.db).
Entities whose id already exists are skipped, so the script can be
run repeatedly. ``--reset`` empties both collections first.
"""

from __future__ import annotations

import sys
from datetime import datetime, timezone
from pathlib import Path

# Add src to path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / "src"))

from moviedb.config import settings  # noqa: E402
from moviedb.db.session import get_engine, init_db, make_session_factory  # noqa: E402
from moviedb.errors import EntityConflictError  # noqa: E402
from moviedb.services import build_services  # noqa: E402

DEMO_GENRES = [
    {"_id": "1", "title": "Romantic", "description": "Romantic description"},
    {"_id": "2", "title": "Drama", "description": "Drama description"},
    {"_id": "3", "title": "Action", "description": "Action description"},
    {"_id": "4", "title": "Thriller", "description": "Thriller description"},
]

# (id, name, duration, rating, genre ids)
DEMO_MOVIES = [
    ("1", "movieName", 5, 8, ["1", "2", "3"]),
    ("2", "movieName2", 6, 4, ["4"]),
    ("3", "movieName3", 7, 3, ["4", "1"]),
    ("4", "movieName4", 8, 5, ["2"]),
    ("5", "movieName5", 9, 6, ["3", "1"]),
]


def main() -> int:
    """Seed the database."""
    reset = "--reset" in sys.argv[1:]

    engine = get_engine(settings.db_path)
    init_db(engine)
    services = build_services(make_session_factory(engine))

    if reset:
        for service in services.values():
            print(f"Cleared {service.store.clear()} {service.name}")

    created = 0
    released = datetime.now(timezone.utc)

    for genre in DEMO_GENRES:
        try:
            services["genres"].create(genre)
            created += 1
        except EntityConflictError:
            print(f"  Genre {genre['_id']} exists, skipping")

    for movie_id, name, duration, rating, genres in DEMO_MOVIES:
        try:
            services["movies"].create(
                {
                    "_id": movie_id,
                    "name": name,
                    "description": f"Movie description{movie_id if movie_id != '1' else ''}",
                    "duration": duration,
                    "rating": rating,
                    "releaseDate": released,
                    "genres": genres,
                }
            )
            created += 1
        except EntityConflictError:
            print(f"  Movie {movie_id} exists, skipping")

    print(f"Created {created} entities in {settings.db_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
