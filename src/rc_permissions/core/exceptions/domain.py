"""Domain-specific exceptions for rc-permissions.

Two failure kinds reach callers of the permission engine: validation
failures (including not-found and duplicate grants) and authorization
failures. Callers map them to HTTP statuses by type.
"""

from typing import Any, Dict, Optional

from ...config.constants import AccessLevel, ErrorCodes, PrincipalType
from .base import RCPermissionsError


# Configuration Errors
class ConfigurationError(RCPermissionsError):
    """Raised when there's a configuration issue."""
    pass


# Validation Errors
class ValidationError(RCPermissionsError):
    """Raised when a request cannot be honoured as given."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code or ErrorCodes.VALIDATION_FAILED, details)


class NotFoundError(ValidationError):
    """Raised when an RC or an access record does not exist."""

    def __init__(self, entity_type: str, identifier: Any, message: Optional[str] = None):
        self.entity_type = entity_type
        self.identifier = identifier
        super().__init__(
            message or f"{entity_type} not found: {identifier}",
            ErrorCodes.NOT_FOUND,
            {"entity_type": entity_type, "identifier": str(identifier)},
        )


class DuplicateGrantError(ValidationError):
    """Raised when a principal already holds a grant on the RC."""

    def __init__(
        self,
        message: str,
        principal_identifier: str,
        principal_type: PrincipalType,
        existing_level: AccessLevel,
        requested_level: AccessLevel,
    ):
        self.principal_identifier = principal_identifier
        self.principal_type = principal_type
        self.existing_level = existing_level
        self.requested_level = requested_level
        super().__init__(
            message,
            ErrorCodes.DUPLICATE_GRANT,
            {
                "principal_identifier": principal_identifier,
                "principal_type": principal_type.value,
                "existing_level": existing_level.value,
                "requested_level": requested_level.value,
            },
        )


# Authorization Errors
class AuthorizationError(RCPermissionsError):
    """Raised when the requester is not an owner of the RC."""

    def __init__(
        self,
        message: str,
        requester: Optional[str] = None,
        resource_id: Optional[int] = None,
    ):
        self.requester = requester
        self.resource_id = resource_id
        details = {}
        if requester is not None:
            details["requester"] = requester
        if resource_id is not None:
            details["resource_id"] = resource_id
        super().__init__(message, ErrorCodes.NOT_OWNER, details)


# External Service Errors
class DirectoryLookupError(RCPermissionsError):
    """Raised when the external directory cannot be queried."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCodes.DIRECTORY_UNAVAILABLE, details)


class CacheError(RCPermissionsError):
    """Raised when the access-level cache backend fails."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, ErrorCodes.CACHE_ERROR, details)
