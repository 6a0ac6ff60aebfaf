"""Local user lookup backed by asyncpg."""

import logging
from typing import Optional

import asyncpg

from ....config.constants import DatabaseSchemas
from ....core.exceptions import DatabaseError
from ...database.entities.protocols import DatabaseRepository
from ..entities.principal import LocalPrincipal
from ..utils.queries import USER_GET_BY_ID, USER_GET_BY_USERNAME


logger = logging.getLogger(__name__)


class AsyncPGPrincipalRepository:
    """Read-only repository over the application's users table."""

    def __init__(self, database: DatabaseRepository, schema: str = DatabaseSchemas.DEFAULT):
        if database is None:
            raise ValueError("Database repository is required")
        self._db = database
        self._schema = schema

    async def find_by_identifier(self, identifier: str) -> Optional[LocalPrincipal]:
        if not identifier:
            return None
        query = USER_GET_BY_USERNAME.format(schema=self._schema)
        try:
            row = await self._db.fetchrow(query, identifier)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to look up user '{identifier}': {e}")
            raise DatabaseError(f"Failed to look up user: {e}") from e
        return self._map_row(row) if row else None

    async def find_by_id(self, user_id: int) -> Optional[LocalPrincipal]:
        query = USER_GET_BY_ID.format(schema=self._schema)
        try:
            row = await self._db.fetchrow(query, user_id)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to look up user id {user_id}: {e}")
            raise DatabaseError(f"Failed to look up user: {e}") from e
        return self._map_row(row) if row else None

    @staticmethod
    def _map_row(row) -> LocalPrincipal:
        return LocalPrincipal(
            id=row["id"],
            username=row["username"],
            full_name=row["full_name"],
        )
