"""Protocol interfaces for access grant storage and caching."""

from abc import abstractmethod
from typing import List, Optional, Protocol, Sequence, runtime_checkable

from ....config.constants import AccessLevel, PrincipalType
from .access_grant import AccessGrant


@runtime_checkable
class AccessGrantStore(Protocol):
    """Protocol for persisting access grants."""

    @abstractmethod
    async def find_by_id(self, grant_id: int) -> Optional[AccessGrant]:
        ...

    @abstractmethod
    async def find_by_resource(self, resource_id: int) -> List[AccessGrant]:
        """All explicit grants on an RC, oldest first."""
        ...

    @abstractmethod
    async def find_by_resource_and_local_user(
        self, resource_id: int, local_user_id: int
    ) -> Optional[AccessGrant]:
        ...

    @abstractmethod
    async def find_by_resource_and_identifier(
        self, resource_id: int, principal_identifier: str, principal_type: PrincipalType
    ) -> Optional[AccessGrant]:
        ...

    @abstractmethod
    async def find_by_principal_identifiers(
        self,
        identifiers: Sequence[str],
        principal_types: Sequence[PrincipalType],
        resource_id: Optional[int] = None,
    ) -> List[AccessGrant]:
        """Grants whose identifier and type are both in the given sets."""
        ...

    @abstractmethod
    async def count_owners(self, resource_id: int) -> int:
        """Number of explicit OWNER grants on an RC."""
        ...

    @abstractmethod
    async def create(self, grant: AccessGrant) -> AccessGrant:
        """Insert a grant and return it with id and timestamp populated.

        Raises EntityAlreadyExistsError on a unique violation.
        """
        ...

    @abstractmethod
    async def update_access_level(self, grant_id: int, access_level: AccessLevel) -> AccessGrant:
        ...

    @abstractmethod
    async def delete_by_id(self, grant_id: int) -> bool:
        ...


@runtime_checkable
class AccessLevelCache(Protocol):
    """Protocol for caching effective access levels.

    Only granted levels are cached; a miss and "no access" look the same.
    Entries are stored per RC generation. Invalidating an RC moves it to a
    new generation, so values computed against an older generation are never
    read again.
    """

    @abstractmethod
    async def generation(self, rc_id: int) -> int:
        """Current cache generation of an RC."""
        ...

    @abstractmethod
    async def get(
        self,
        rc_id: int,
        identifier: str,
        group_memberships: Sequence[str],
        generation: int,
    ) -> Optional[AccessLevel]:
        ...

    @abstractmethod
    async def set(
        self,
        rc_id: int,
        identifier: str,
        group_memberships: Sequence[str],
        level: AccessLevel,
        generation: int,
    ) -> None:
        ...

    @abstractmethod
    async def invalidate_resource(self, rc_id: int) -> None:
        """Advance the RC's generation and drop its cached entries."""
        ...
