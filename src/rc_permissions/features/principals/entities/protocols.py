"""Protocol interfaces for principal lookup.

PrincipalStore covers local accounts; DirectoryLookup is the external
directory (LDAP, Keycloak, OAuth2 provider) consumed during grant creation.
"""

from abc import abstractmethod
from typing import List, Optional, Protocol, runtime_checkable

from .principal import DirectoryEntry, LocalPrincipal


@runtime_checkable
class PrincipalStore(Protocol):
    """Protocol for read access to local user accounts."""

    @abstractmethod
    async def find_by_identifier(self, identifier: str) -> Optional[LocalPrincipal]:
        """Find a local account by username."""
        ...

    @abstractmethod
    async def find_by_id(self, user_id: int) -> Optional[LocalPrincipal]:
        """Find a local account by primary key."""
        ...


@runtime_checkable
class DirectoryLookup(Protocol):
    """Protocol for searching an external identity directory."""

    @abstractmethod
    async def search_users(self, query: str, limit: int) -> List[DirectoryEntry]:
        """Search users by identifier, name or email."""
        ...

    @abstractmethod
    async def search_groups(self, query: str, limit: int) -> List[DirectoryEntry]:
        """Search security groups."""
        ...

    @abstractmethod
    async def search_distribution_lists(self, query: str, limit: int) -> List[DirectoryEntry]:
        """Search distribution lists."""
        ...
