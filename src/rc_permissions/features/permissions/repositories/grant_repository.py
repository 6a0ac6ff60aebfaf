"""Access grant repository backed by asyncpg.

The two unique indexes on rc_access are the authoritative duplicate check;
a violation surfaces as EntityAlreadyExistsError so the service can turn it
into a duplicate-grant error.
"""

import logging
from dataclasses import replace
from typing import List, Optional, Sequence

import asyncpg

from ....config.constants import AccessLevel, DatabaseSchemas, PrincipalType
from ....core.exceptions import EntityAlreadyExistsError, NotFoundError
from ...database.entities.protocols import DatabaseRepository
from ..entities.access_grant import AccessGrant
from ..utils.error_handling import grant_storage_error_handler
from ..utils.queries import (
    RC_ACCESS_CREATE_TABLE,
    RC_ACCESS_CREATE_INDEXES,
    GRANT_GET_BY_ID,
    GRANT_LIST_BY_RESOURCE,
    GRANT_GET_BY_RESOURCE_AND_USER,
    GRANT_GET_BY_RESOURCE_AND_IDENTIFIER,
    GRANT_LIST_BY_PRINCIPALS,
    GRANT_COUNT_OWNERS,
    GRANT_INSERT,
    GRANT_UPDATE_LEVEL,
    GRANT_DELETE,
)


logger = logging.getLogger(__name__)


class AsyncPGAccessGrantRepository:
    """AccessGrantStore implementation over the rc_access table."""

    def __init__(self, database: DatabaseRepository, schema: str = DatabaseSchemas.DEFAULT):
        """Initialize with a database repository.

        Args:
            database: Anything implementing DatabaseRepository
            schema: Schema holding rc_access, responsibility_centres and users
        """
        if database is None:
            raise ValueError("Database repository is required")
        self._db = database
        self._schema = schema

    def _sql(self, template: str) -> str:
        return template.format(schema=self._schema)

    @grant_storage_error_handler("create rc_access table")
    async def ensure_table(self) -> None:
        """Create rc_access and its indexes if they do not exist."""
        await self._db.execute(self._sql(RC_ACCESS_CREATE_TABLE))
        for statement in RC_ACCESS_CREATE_INDEXES:
            await self._db.execute(self._sql(statement))
        logger.info(f"Ensured {self._schema}.rc_access table and indexes")

    @grant_storage_error_handler("load access grant")
    async def find_by_id(self, grant_id: int) -> Optional[AccessGrant]:
        row = await self._db.fetchrow(self._sql(GRANT_GET_BY_ID), grant_id)
        return self._map_row_to_grant(row) if row else None

    @grant_storage_error_handler("list access grants for RC")
    async def find_by_resource(self, resource_id: int) -> List[AccessGrant]:
        rows = await self._db.fetch(self._sql(GRANT_LIST_BY_RESOURCE), resource_id)
        return [self._map_row_to_grant(row) for row in rows]

    @grant_storage_error_handler("load access grant by local user")
    async def find_by_resource_and_local_user(
        self, resource_id: int, local_user_id: int
    ) -> Optional[AccessGrant]:
        row = await self._db.fetchrow(
            self._sql(GRANT_GET_BY_RESOURCE_AND_USER), resource_id, local_user_id
        )
        return self._map_row_to_grant(row) if row else None

    @grant_storage_error_handler("load access grant by principal")
    async def find_by_resource_and_identifier(
        self, resource_id: int, principal_identifier: str, principal_type: PrincipalType
    ) -> Optional[AccessGrant]:
        row = await self._db.fetchrow(
            self._sql(GRANT_GET_BY_RESOURCE_AND_IDENTIFIER),
            resource_id,
            principal_identifier,
            principal_type.value,
        )
        return self._map_row_to_grant(row) if row else None

    @grant_storage_error_handler("list access grants by principals")
    async def find_by_principal_identifiers(
        self,
        identifiers: Sequence[str],
        principal_types: Sequence[PrincipalType],
        resource_id: Optional[int] = None,
    ) -> List[AccessGrant]:
        if not identifiers or not principal_types:
            return []
        rows = await self._db.fetch(
            self._sql(GRANT_LIST_BY_PRINCIPALS),
            list(identifiers),
            [principal_type.value for principal_type in principal_types],
            resource_id,
        )
        return [self._map_row_to_grant(row) for row in rows]

    @grant_storage_error_handler("count RC owners")
    async def count_owners(self, resource_id: int) -> int:
        count = await self._db.fetchval(self._sql(GRANT_COUNT_OWNERS), resource_id)
        return int(count or 0)

    @grant_storage_error_handler("create access grant")
    async def create(self, grant: AccessGrant) -> AccessGrant:
        """Insert a grant.

        The insert skips conflicting rows instead of failing so the enclosing
        transaction stays usable; either outcome of a conflict is reported as
        EntityAlreadyExistsError.
        """
        key = f"{grant.resource_id}:{grant.principal_type.value}:{grant.principal_identifier}"
        try:
            row = await self._db.fetchrow(
                self._sql(GRANT_INSERT),
                grant.resource_id,
                grant.local_user_id,
                grant.access_level.value,
                grant.principal_type.value,
                grant.principal_identifier,
                grant.principal_display_name,
                grant.granted_by,
            )
        except asyncpg.UniqueViolationError as e:
            logger.info(f"Unique violation creating grant {key}: {e}")
            raise EntityAlreadyExistsError("AccessGrant", key) from e

        if row is None:
            logger.info(f"Grant {key} conflicts with an existing row")
            raise EntityAlreadyExistsError("AccessGrant", key)

        return replace(grant, id=row["id"], granted_at=row["granted_at"])

    @grant_storage_error_handler("update access grant")
    async def update_access_level(self, grant_id: int, access_level: AccessLevel) -> AccessGrant:
        updated = await self._db.fetchval(
            self._sql(GRANT_UPDATE_LEVEL), grant_id, access_level.value
        )
        if updated is None:
            raise NotFoundError("Access record", grant_id)

        grant = await self.find_by_id(grant_id)
        if grant is None:
            raise NotFoundError("Access record", grant_id)
        return grant

    @grant_storage_error_handler("delete access grant")
    async def delete_by_id(self, grant_id: int) -> bool:
        deleted = await self._db.fetchval(self._sql(GRANT_DELETE), grant_id)
        return deleted is not None

    @staticmethod
    def _map_row_to_grant(row) -> AccessGrant:
        return AccessGrant(
            id=row["id"],
            resource_id=row["responsibility_centre_id"],
            principal_identifier=row["principal_identifier"],
            principal_type=PrincipalType(row["principal_type"]),
            principal_display_name=row["principal_display_name"],
            access_level=AccessLevel(row["access_level"]),
            local_user_id=row["user_id"],
            granted_by=row["granted_by_id"],
            granted_at=row["granted_at"],
            resource_name=row["resource_name"],
        )
