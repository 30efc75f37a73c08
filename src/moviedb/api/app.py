"""FastAPI application factory."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy import Engine

from moviedb import __version__
from moviedb.config import settings
from moviedb.core.collection import CollectionService
from moviedb.db.session import get_engine, init_db, make_session_factory
from moviedb.errors import ServiceError
from moviedb.logging_config import setup_logging
from moviedb.services import build_services

logger = logging.getLogger(__name__)


def get_services(request: Request) -> dict[str, CollectionService]:
    """Dependency to get the collection services of the running app."""
    return request.app.state.services


def create_app(db_path: Path | None = None, engine: Engine | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        db_path: Optional path to database file. Defaults to settings.db_path.
        engine: Optional ready engine; takes precedence over db_path.

    Returns:
        Configured FastAPI application.
    """
    setup_logging(settings.log_level)

    if engine is None:
        engine = get_engine(db_path)
    init_db(engine)

    app = FastAPI(
        title="moviedb API",
        description="Genres and movies collections",
        version=__version__,
    )
    app.state.services = build_services(make_session_factory(engine), settings.max_page_size)

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        """Render service errors with their own status code."""
        logger.info(f"{request.method} {request.url.path} -> {exc.code} {exc.type}")
        return JSONResponse(status_code=exc.code, content=jsonable_encoder(exc.to_dict()))

    from moviedb.api.routes.collections import build_router

    for name in app.state.services:
        app.include_router(build_router(name))

    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app
