"""Database session management.

Provides session factory for SQLite database access with proper
thread-safety for FastAPI concurrency.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from moviedb.config import settings
from moviedb.db.schema import Base

# Module-level engine cache for connection pooling
_engine_cache: dict[str, Engine] = {}


def get_engine(db_path: Path | None = None) -> Engine:
    """Get SQLAlchemy engine for the database.

    Engines are cached by resolved db_path. Subsequent calls with the
    same path return the cached engine.

    Args:
        db_path: Path to SQLite database file. Defaults to settings.db_path.

    Returns:
        SQLAlchemy engine instance (cached).
    """
    if db_path is None:
        db_path = settings.db_path

    db_path = Path(db_path)
    cache_key = str(db_path.resolve())

    if cache_key in _engine_cache:
        return _engine_cache[cache_key]

    db_path.parent.mkdir(parents=True, exist_ok=True)

    # - check_same_thread=False: Pooled connections move between request threads
    # - Default pool: one connection per session, never shared
    engine = create_engine(
        f"sqlite:///{db_path}",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    _engine_cache[cache_key] = engine

    return engine


def create_memory_engine() -> Engine:
    """Create an in-memory SQLite engine with the schema applied.

    All sessions share one connection, so data survives across sessions
    for the lifetime of the engine.
    """
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    return engine


def make_session_factory(engine: Engine) -> sessionmaker:
    """Build a session factory bound to engine."""
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker) -> Generator[Session, None, None]:
    """Context manager for database sessions with automatic cleanup.

    Commits on successful exit, rolls back on exception, and always
    closes the session.

    Args:
        factory: Session factory to open the session from.

    Yields:
        SQLAlchemy Session instance.

    Example:
        with session_scope(factory) as session:
            session.add(record)
            # Auto-commits on exit, rolls back on exception
    """
    session = factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> None:
    """Initialize database schema.

    Call this once during application startup to create tables.
    """
    Base.metadata.create_all(engine)
