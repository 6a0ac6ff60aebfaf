"""AsyncPG database service.

Owns the connection pool and binds the connection of an open transaction to
a context variable, so repositories issuing queries inside
``async with service.transaction()`` all run on that connection.
"""

import logging
from contextlib import asynccontextmanager
from contextvars import ContextVar
from typing import Any, List, Optional

import asyncpg

from ....config.settings import PermissionSettings
from ....core.exceptions import ConfigurationError, ConnectionError, TransactionError


logger = logging.getLogger(__name__)

_current_connection: ContextVar[Optional[asyncpg.Connection]] = ContextVar(
    "rc_permissions_connection", default=None
)


class AsyncPGDatabaseService:
    """Connection pool wrapper implementing DatabaseRepository and TransactionManager."""

    def __init__(
        self,
        dsn: str,
        min_size: int = 2,
        max_size: int = 10,
        command_timeout: float = 30.0,
    ):
        if not dsn:
            raise ConfigurationError("Database DSN is required")
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self._pool: Optional[asyncpg.Pool] = None

    @classmethod
    def from_settings(cls, settings: PermissionSettings) -> "AsyncPGDatabaseService":
        """Create a service from application settings."""
        if not settings.database_url:
            raise ConfigurationError("RC_PERMISSIONS_DATABASE_URL is not set")
        return cls(
            dsn=settings.database_url,
            min_size=settings.db_pool_min_size,
            max_size=settings.db_pool_max_size,
            command_timeout=settings.db_command_timeout,
        )

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    async def connect(self) -> None:
        """Create the connection pool."""
        if self._pool is not None:
            return
        try:
            self._pool = await asyncpg.create_pool(
                dsn=self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                command_timeout=self._command_timeout,
            )
            logger.info(f"Database pool created (min={self._min_size}, max={self._max_size})")
        except (OSError, asyncpg.PostgresError) as e:
            logger.error(f"Failed to create database pool: {e}")
            raise ConnectionError(f"Failed to connect to database: {e}") from e

    async def close(self) -> None:
        """Close the connection pool."""
        if self._pool is None:
            return
        await self._pool.close()
        self._pool = None
        logger.info("Database pool closed")

    @asynccontextmanager
    async def get_connection(self):
        """Yield the transaction-bound connection, or a pooled one."""
        bound = _current_connection.get()
        if bound is not None:
            yield bound
            return

        if self._pool is None:
            raise ConnectionError("Database pool is not initialized; call connect() first")

        async with self._pool.acquire() as connection:
            yield connection

    @asynccontextmanager
    async def transaction(self):
        """Start a database transaction.

        Nested calls reuse the outer transaction.
        """
        bound = _current_connection.get()
        if bound is not None:
            yield bound
            return

        async with self.get_connection() as conn:
            token = _current_connection.set(conn)
            try:
                async with conn.transaction():
                    yield conn
            except asyncpg.exceptions.SerializationError as e:
                raise TransactionError(f"Transaction aborted: {e}") from e
            finally:
                _current_connection.reset(token)

    async def fetch(self, query: str, *args: Any) -> List[asyncpg.Record]:
        async with self.get_connection() as conn:
            return await conn.fetch(query, *args)

    async def fetchrow(self, query: str, *args: Any) -> Optional[asyncpg.Record]:
        async with self.get_connection() as conn:
            return await conn.fetchrow(query, *args)

    async def fetchval(self, query: str, *args: Any) -> Any:
        async with self.get_connection() as conn:
            return await conn.fetchval(query, *args)

    async def execute(self, query: str, *args: Any) -> str:
        async with self.get_connection() as conn:
            return await conn.execute(query, *args)
