"""Permissions feature: access grants and the RC permission engine."""

from .entities import AccessGrant, AccessGrantStore, AccessLevelCache
from .repositories import AsyncPGAccessGrantRepository
from .services import RCPermissionService
from .utils.factory import create_permission_service

__all__ = [
    "AccessGrant",
    "AccessGrantStore",
    "AccessLevelCache",
    "AsyncPGAccessGrantRepository",
    "RCPermissionService",
    "create_permission_service",
]
