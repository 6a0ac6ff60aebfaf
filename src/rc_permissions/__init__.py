"""rc-permissions: permission engine for Responsibility Centres.

Resolves principals, manages access grants and computes effective access
levels (OWNER > READ_WRITE > READ_ONLY) for shared Responsibility Centres.
"""

from .__version__ import __version__
from .config import (
    AccessLevel,
    PrincipalType,
    DirectorySource,
    PermissionSettings,
    get_settings,
    setup_logging,
)
from .core.exceptions import (
    RCPermissionsError,
    ValidationError,
    NotFoundError,
    DuplicateGrantError,
    AuthorizationError,
    DatabaseError,
    DirectoryLookupError,
)
from .features.database import AsyncPGDatabaseService
from .features.principals import (
    LocalPrincipal,
    DirectoryPrincipal,
    DirectoryEntry,
    PrincipalResolver,
)
from .features.resources import ResponsibilityCentre
from .features.permissions import (
    AccessGrant,
    RCPermissionService,
    create_permission_service,
)

__all__ = [
    "__version__",

    # Configuration
    "AccessLevel",
    "PrincipalType",
    "DirectorySource",
    "PermissionSettings",
    "get_settings",
    "setup_logging",

    # Exceptions
    "RCPermissionsError",
    "ValidationError",
    "NotFoundError",
    "DuplicateGrantError",
    "AuthorizationError",
    "DatabaseError",
    "DirectoryLookupError",

    # Entities
    "LocalPrincipal",
    "DirectoryPrincipal",
    "DirectoryEntry",
    "ResponsibilityCentre",
    "AccessGrant",

    # Services
    "AsyncPGDatabaseService",
    "PrincipalResolver",
    "RCPermissionService",
    "create_permission_service",
]
