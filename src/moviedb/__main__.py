"""Serve the moviedb API with uvicorn.

Usage:
    python -m moviedb
"""

from __future__ import annotations

import uvicorn

from moviedb.config import settings
from moviedb.logging_config import setup_logging


def main() -> None:
    """Run the API server on the configured host and port."""
    setup_logging(settings.log_level)

    from moviedb.api.app import create_app

    uvicorn.run(create_app(), host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
