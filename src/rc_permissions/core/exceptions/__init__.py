"""Exception hierarchy for rc-permissions."""

from .base import RCPermissionsError, get_http_status_code, create_error_response
from .domain import (
    ConfigurationError,
    ValidationError,
    NotFoundError,
    DuplicateGrantError,
    AuthorizationError,
    DirectoryLookupError,
    CacheError,
)
from .database import (
    DatabaseError,
    ConnectionError,
    TransactionError,
    RepositoryError,
    EntityAlreadyExistsError,
)
from .http_mapping import HTTP_STATUS_MAP, HttpStatusMapper

__all__ = [
    # Base Exception
    "RCPermissionsError",

    # Domain Exceptions
    "ConfigurationError",
    "ValidationError",
    "NotFoundError",
    "DuplicateGrantError",
    "AuthorizationError",
    "DirectoryLookupError",
    "CacheError",

    # Database Exceptions
    "DatabaseError",
    "ConnectionError",
    "TransactionError",
    "RepositoryError",
    "EntityAlreadyExistsError",

    # Utilities
    "get_http_status_code",
    "create_error_response",
    "HTTP_STATUS_MAP",
    "HttpStatusMapper",
]
