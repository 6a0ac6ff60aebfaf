"""HTTP status code mapping for exceptions.

Status codes are resolved by walking the exception's MRO, so subclasses
inherit their parent's status unless mapped explicitly.
"""

from typing import Dict, Optional, Type

from .base import RCPermissionsError
from .domain import (
    ConfigurationError,
    ValidationError,
    NotFoundError,
    DuplicateGrantError,
    AuthorizationError,
    DirectoryLookupError,
    CacheError,
)
from .database import DatabaseError, ConnectionError


HTTP_STATUS_MAP: Dict[Type[Exception], int] = {
    # 400 Bad Request
    ValidationError: 400,

    # 403 Forbidden
    AuthorizationError: 403,

    # 404 Not Found
    NotFoundError: 404,

    # 409 Conflict
    DuplicateGrantError: 409,

    # 500 Internal Server Error
    DatabaseError: 500,
    ConfigurationError: 500,

    # 503 Service Unavailable
    ConnectionError: 503,
    DirectoryLookupError: 503,
    CacheError: 503,

    # Default for RCPermissionsError
    RCPermissionsError: 500,
}


class HttpStatusMapper:
    """HTTP status code mapper with per-instance overrides."""

    def __init__(self, overrides: Optional[Dict[Type[Exception], int]] = None):
        self._mapping = {**HTTP_STATUS_MAP, **(overrides or {})}
        self._cache: Dict[Type[Exception], int] = {}

    def get_status_code(self, exception: Exception) -> int:
        """Get HTTP status code for exception.

        Args:
            exception: The exception instance

        Returns:
            HTTP status code, 500 for unmapped exceptions
        """
        exception_type = type(exception)
        if exception_type in self._cache:
            return self._cache[exception_type]

        status_code = 500
        for klass in exception_type.__mro__:
            if klass in self._mapping:
                status_code = self._mapping[klass]
                break

        self._cache[exception_type] = status_code
        return status_code


_default_mapper = HttpStatusMapper()


def get_http_status_code(exception: Exception) -> int:
    """Get HTTP status code for exception using the default mapping."""
    return _default_mapper.get_status_code(exception)
