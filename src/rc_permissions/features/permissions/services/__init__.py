"""Permission services."""

from .permission_service import RCPermissionService

__all__ = ["RCPermissionService"]
