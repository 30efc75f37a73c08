"""API module for moviedb.

REST gateway over the collection services:
- Maps HTTP verbs to collection operations
- Translates service errors to status codes
- Forbidden: validation or storage logic of its own
"""
