"""Database-specific exceptions for rc-permissions."""

from .base import RCPermissionsError


class DatabaseError(RCPermissionsError):
    """Base class for database-related errors."""
    pass


class ConnectionError(DatabaseError):
    """Raised when the connection pool is unavailable."""
    pass


class TransactionError(DatabaseError):
    """Raised when a database transaction fails."""
    pass


class RepositoryError(DatabaseError):
    """Base class for repository-related errors."""
    pass


class EntityAlreadyExistsError(RepositoryError):
    """Raised when an insert violates a uniqueness constraint."""

    def __init__(self, entity_type: str, identifier: str):
        self.entity_type = entity_type
        self.identifier = identifier
        super().__init__(f"{entity_type} with identifier '{identifier}' already exists")
