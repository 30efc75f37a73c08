"""Runtime configuration.

Settings are read from environment variables once, at import time.
Set the variables before importing this module.
"""

import os
from dataclasses import dataclass
from pathlib import Path


@dataclass
class Settings:
    """Application settings loaded from environment variables."""

    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", "3000"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # SQLite file backing every collection
    db_path: Path = Path(os.getenv("MOVIEDB_DB_PATH", "data/moviedb.db"))

    # Upper bound for the ``pageSize`` parameter of ``list``
    max_page_size: int = int(os.getenv("MOVIEDB_MAX_PAGE_SIZE", "100"))


settings = Settings()
