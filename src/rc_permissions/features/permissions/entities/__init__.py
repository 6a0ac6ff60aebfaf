"""Permission entities package."""

from .access_grant import AccessGrant
from .protocols import AccessGrantStore, AccessLevelCache

__all__ = [
    # Domain entities
    "AccessGrant",

    # Protocols
    "AccessGrantStore",
    "AccessLevelCache",
]
