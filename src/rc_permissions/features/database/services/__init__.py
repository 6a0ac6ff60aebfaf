"""Database services package."""

from .database_service import AsyncPGDatabaseService

__all__ = [
    "AsyncPGDatabaseService",
]
