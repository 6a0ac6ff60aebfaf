"""Principal resolution.

Maps a bare identifier string onto a local account or a directory identity.
"""

import logging
from typing import List, Optional

from ....config.constants import DefaultValues, PrincipalType
from ....core.exceptions import ValidationError
from ..entities.principal import DirectoryEntry, DirectoryPrincipal, LocalPrincipal, Principal
from ..entities.protocols import DirectoryLookup, PrincipalStore


logger = logging.getLogger(__name__)


class PrincipalResolver:
    """Resolve identifiers against the local user store and the directory."""

    def __init__(
        self,
        principal_store: PrincipalStore,
        directory: Optional[DirectoryLookup] = None,
        search_limit: int = DefaultValues.DIRECTORY_SEARCH_LIMIT,
    ):
        if principal_store is None:
            raise ValueError("Principal store is required")
        self._principals = principal_store
        self._directory = directory
        self._search_limit = search_limit

    @property
    def has_directory(self) -> bool:
        return self._directory is not None

    async def find_local(self, identifier: str) -> Optional[LocalPrincipal]:
        if not identifier:
            return None
        return await self._principals.find_by_identifier(identifier)

    async def resolve(self, identifier: str) -> Principal:
        """Resolve an identifier without consulting the directory.

        Identifiers without a local account become a DirectoryPrincipal
        carrying only the identifier.
        """
        local = await self.find_local(identifier)
        if local is not None:
            return local
        return DirectoryPrincipal(identifier=identifier)

    async def resolve_grant_target(self, identifier: str, limit: Optional[int] = None) -> Principal:
        """Resolve the target of a user grant.

        Local accounts win. Otherwise the directory must return exactly one
        entry whose identifier equals ``identifier`` ignoring case.

        Raises:
            ValidationError: No account and no unique directory match.
        """
        if not identifier or not identifier.strip():
            raise ValidationError("Principal identifier is required")

        local = await self.find_local(identifier)
        if local is not None:
            return local

        if self._directory is None:
            logger.debug(f"No directory configured; '{identifier}' cannot be resolved")
            raise ValidationError(f"User not found: {identifier}")

        entries = await self._directory.search_users(identifier, limit or self._search_limit)
        matches: List[DirectoryEntry] = [entry for entry in entries if entry.matches(identifier)]

        if not matches:
            raise ValidationError(f"User not found: {identifier}")
        if len(matches) > 1:
            logger.warning(f"Directory returned {len(matches)} exact matches for '{identifier}'")
            raise ValidationError(
                f"User identifier '{identifier}' is ambiguous in the directory",
                details={"identifier": identifier, "matches": len(matches)},
            )

        principal = matches[0].to_principal()
        logger.debug(f"Resolved '{identifier}' via directory as '{principal.identifier}'")
        return principal

    async def search_directory(
        self,
        query: str,
        principal_type: PrincipalType = PrincipalType.USER,
        limit: Optional[int] = None,
    ) -> List[DirectoryEntry]:
        """Search the directory for grant candidates of one principal type.

        Returns an empty list when no directory is configured.
        """
        if self._directory is None or not query or not query.strip():
            return []

        limit = min(limit or self._search_limit, DefaultValues.MAX_DIRECTORY_SEARCH_LIMIT)
        if principal_type is PrincipalType.GROUP:
            return await self._directory.search_groups(query, limit)
        if principal_type is PrincipalType.DISTRIBUTION_LIST:
            return await self._directory.search_distribution_lists(query, limit)
        return await self._directory.search_users(query, limit)
