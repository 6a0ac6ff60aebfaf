"""Responsibility Centre repository backed by asyncpg."""

import logging
from typing import Optional

import asyncpg

from ....config.constants import DatabaseSchemas
from ....core.exceptions import DatabaseError
from ...database.entities.protocols import DatabaseRepository
from ...principals.entities.principal import LocalPrincipal
from ..entities.responsibility_centre import ResponsibilityCentre
from ..utils.queries import RC_GET_BY_ID


logger = logging.getLogger(__name__)


class AsyncPGResponsibilityCentreRepository:
    """Read-only access to responsibility_centres joined with the owning user."""

    def __init__(self, database: DatabaseRepository, schema: str = DatabaseSchemas.DEFAULT):
        if database is None:
            raise ValueError("Database repository is required")
        self._db = database
        self._schema = schema

    async def find_by_id(self, rc_id: int) -> Optional[ResponsibilityCentre]:
        query = RC_GET_BY_ID.format(schema=self._schema)
        try:
            row = await self._db.fetchrow(query, rc_id)
        except asyncpg.PostgresError as e:
            logger.error(f"Failed to load RC {rc_id}: {e}")
            raise DatabaseError(f"Failed to load RC: {e}") from e

        if row is None:
            return None
        return ResponsibilityCentre(
            id=row["id"],
            name=row["name"],
            owner=LocalPrincipal(
                id=row["owner_id"],
                username=row["owner_username"],
                full_name=row["owner_full_name"],
            ),
            description=row["description"],
            created_at=row["created_at"],
        )
