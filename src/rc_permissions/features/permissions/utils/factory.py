"""Factory for wiring the permission engine onto an asyncpg database."""

import logging
from typing import Optional

from ....config.settings import PermissionSettings, get_settings
from ...database.services.database_service import AsyncPGDatabaseService
from ...principals.entities.protocols import DirectoryLookup
from ...principals.repositories.principal_repository import AsyncPGPrincipalRepository
from ...principals.services.principal_resolver import PrincipalResolver
from ...resources.repositories.rc_repository import AsyncPGResponsibilityCentreRepository
from ..entities.protocols import AccessLevelCache
from ..repositories.grant_repository import AsyncPGAccessGrantRepository
from ..services.permission_service import RCPermissionService


logger = logging.getLogger(__name__)


def create_permission_service(
    database: AsyncPGDatabaseService,
    settings: Optional[PermissionSettings] = None,
    directory: Optional[DirectoryLookup] = None,
    cache: Optional[AccessLevelCache] = None,
) -> RCPermissionService:
    """Build an RCPermissionService whose stores share ``database``.

    When ``directory`` or ``cache`` are omitted they are built from settings
    if Keycloak or Redis is configured there.
    """
    settings = settings or get_settings()
    schema = settings.database_schema

    if directory is None and settings.is_directory_enabled:
        from ...principals.adapters.keycloak_directory import KeycloakDirectoryLookup
        directory = KeycloakDirectoryLookup.from_settings(settings)

    if cache is None and settings.is_cache_enabled:
        from ..adapters.redis_cache import RedisAccessLevelCache
        cache = RedisAccessLevelCache.from_settings(settings)

    resolver = PrincipalResolver(
        AsyncPGPrincipalRepository(database, schema),
        directory=directory,
        search_limit=settings.directory_search_limit,
    )
    service = RCPermissionService(
        resources=AsyncPGResponsibilityCentreRepository(database, schema),
        grants=AsyncPGAccessGrantRepository(database, schema),
        resolver=resolver,
        transactions=database,
        cache=cache,
        demo_rc_name=settings.demo_rc_name,
        directory_search_limit=settings.directory_search_limit,
    )
    logger.debug(
        f"Permission service ready (schema={schema}, directory={directory is not None}, "
        f"cache={cache is not None})"
    )
    return service
