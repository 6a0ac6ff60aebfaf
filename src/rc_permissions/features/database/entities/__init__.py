"""Database entities package."""

from .protocols import DatabaseRepository, TransactionManager

__all__ = [
    "DatabaseRepository",
    "TransactionManager",
]
