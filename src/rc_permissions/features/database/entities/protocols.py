"""Protocol interfaces for database access.

Repositories depend on DatabaseRepository only, so they can run against the
asyncpg service or a test double.
"""

from abc import abstractmethod
from typing import Any, AsyncContextManager, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class DatabaseRepository(Protocol):
    """Protocol for executing queries on the current connection."""

    @abstractmethod
    async def fetch(self, query: str, *args: Any) -> List[Any]:
        """Execute a query and return all rows."""
        ...

    @abstractmethod
    async def fetchrow(self, query: str, *args: Any) -> Optional[Any]:
        """Execute a query and return the first row."""
        ...

    @abstractmethod
    async def fetchval(self, query: str, *args: Any) -> Any:
        """Execute a query and return the first column of the first row."""
        ...

    @abstractmethod
    async def execute(self, query: str, *args: Any) -> str:
        """Execute a command and return its status string."""
        ...


@runtime_checkable
class TransactionManager(Protocol):
    """Protocol for running a unit of work inside one transaction."""

    @abstractmethod
    def transaction(self) -> AsyncContextManager[Any]:
        """Open a transaction shared by every query issued inside the block."""
        ...
