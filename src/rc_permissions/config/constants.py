"""Constants and enums for rc-permissions.

This module defines the enums, cache key patterns and default values used
throughout the permission engine. Enum values correspond to the strings
stored in the ``rc_access`` table.
"""

from enum import Enum
from typing import Final, Iterable, Optional


class AccessLevel(str, Enum):
    """Access levels - corresponds to rc_access.access_level.

    Ranked OWNER > READ_WRITE > READ_ONLY.
    """

    OWNER = "OWNER"
    READ_WRITE = "READ_WRITE"
    READ_ONLY = "READ_ONLY"

    @property
    def rank(self) -> int:
        """Numeric privilege rank, higher is more privileged."""
        return _ACCESS_RANKS[self]

    @property
    def can_edit(self) -> bool:
        """Check if this level allows editing RC content."""
        return self in (AccessLevel.OWNER, AccessLevel.READ_WRITE)

    @classmethod
    def highest(cls, levels: Iterable["AccessLevel"]) -> Optional["AccessLevel"]:
        """Return the most privileged level, or None for an empty iterable."""
        return max(levels, key=lambda level: level.rank, default=None)


_ACCESS_RANKS = {
    AccessLevel.OWNER: 3,
    AccessLevel.READ_WRITE: 2,
    AccessLevel.READ_ONLY: 1,
}


class PrincipalType(str, Enum):
    """Principal types - corresponds to rc_access.principal_type."""

    USER = "USER"
    GROUP = "GROUP"
    DISTRIBUTION_LIST = "DISTRIBUTION_LIST"

    @property
    def label(self) -> str:
        """Human-readable label used in error messages."""
        return _PRINCIPAL_LABELS[self]

    @property
    def is_group(self) -> bool:
        """Check if this principal type is a membership-based principal."""
        return self is not PrincipalType.USER


_PRINCIPAL_LABELS = {
    PrincipalType.USER: "User",
    PrincipalType.GROUP: "Group",
    PrincipalType.DISTRIBUTION_LIST: "Distribution list",
}

GROUP_PRINCIPAL_TYPES: Final[tuple] = (PrincipalType.GROUP, PrincipalType.DISTRIBUTION_LIST)


class DirectorySource(str, Enum):
    """Origin of a directory search result."""

    APP = "APP"
    LDAP = "LDAP"
    KEYCLOAK = "KEYCLOAK"


# Database Schema Names
class DatabaseSchemas:
    """Database schema names."""

    DEFAULT: Final[str] = "public"


class CacheKeys:
    """Cache key patterns for Redis."""

    EFFECTIVE_ACCESS: Final[str] = "rc:access:{rc_id}:{generation}:{identifier}:{groups_digest}"
    RC_PATTERN: Final[str] = "rc:access:{rc_id}:*"
    RC_GENERATION: Final[str] = "rc:access-gen:{rc_id}"


class CacheTTL:
    """Cache TTL values in seconds."""

    EFFECTIVE_ACCESS: Final[int] = 300      # 5 minutes


class DefaultValues:
    """Default values for engine behaviour."""

    DIRECTORY_SEARCH_LIMIT: Final[int] = 50
    MAX_DIRECTORY_SEARCH_LIMIT: Final[int] = 500
    DEMO_RC_NAME: Final[str] = "Demo"
    DISTRIBUTION_LIST_PATH: Final[str] = "/distribution-lists"


class ErrorCodes:
    """Error codes carried by engine exceptions."""

    VALIDATION_FAILED: Final[str] = "VALIDATION_FAILED"
    NOT_FOUND: Final[str] = "NOT_FOUND"
    DUPLICATE_GRANT: Final[str] = "DUPLICATE_GRANT"
    NOT_OWNER: Final[str] = "NOT_OWNER"
    DATABASE_ERROR: Final[str] = "DATABASE_ERROR"
    DIRECTORY_UNAVAILABLE: Final[str] = "DIRECTORY_UNAVAILABLE"
    CACHE_ERROR: Final[str] = "CACHE_ERROR"
