"""Database feature for rc-permissions.

- entities/: DatabaseRepository and TransactionManager protocols
- services/: AsyncPG pool and transaction management
"""

from .entities import DatabaseRepository, TransactionManager
from .services import AsyncPGDatabaseService

__all__ = [
    "DatabaseRepository",
    "TransactionManager",
    "AsyncPGDatabaseService",
]
