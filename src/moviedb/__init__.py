"""moviedb: genres and movies collections behind a REST gateway."""

__version__ = "0.1.0"
