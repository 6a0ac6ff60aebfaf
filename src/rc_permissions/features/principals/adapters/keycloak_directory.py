"""Keycloak-backed directory lookup."""

import logging
from typing import Any, Dict, Iterable, List, Optional

from keycloak import KeycloakAdmin, KeycloakOpenIDConnection
from keycloak.exceptions import KeycloakError

from ....config.constants import DefaultValues, DirectorySource
from ....config.settings import PermissionSettings
from ....core.exceptions import ConfigurationError, DirectoryLookupError
from ..entities.principal import DirectoryEntry


logger = logging.getLogger(__name__)


class KeycloakDirectoryLookup:
    """DirectoryLookup implementation over the Keycloak Admin API.

    Users map to Keycloak users keyed by username. Groups are Keycloak groups
    outside the distribution-list path; distribution lists are the groups
    below it.
    """

    def __init__(
        self,
        admin_client: KeycloakAdmin,
        distribution_list_path: str = DefaultValues.DISTRIBUTION_LIST_PATH,
    ):
        if admin_client is None:
            raise ValueError("Keycloak admin client is required")
        self._admin = admin_client
        self._distribution_list_path = "/" + distribution_list_path.strip("/")

    @classmethod
    def from_settings(cls, settings: PermissionSettings) -> "KeycloakDirectoryLookup":
        """Build a lookup using client-credentials authentication."""
        if not settings.is_directory_enabled:
            raise ConfigurationError("Keycloak server URL and client secret must be configured")

        server_url = settings.keycloak_server_url.rstrip("/")
        if server_url.endswith("/auth"):
            server_url = server_url[:-5]

        connection = KeycloakOpenIDConnection(
            server_url=server_url,
            realm_name=settings.keycloak_realm,
            client_id=settings.keycloak_client_id,
            client_secret_key=settings.keycloak_client_secret.get_secret_value(),
            verify=settings.keycloak_verify_ssl,
        )
        logger.info(f"Keycloak directory configured for realm: {settings.keycloak_realm}")
        return cls(KeycloakAdmin(connection=connection), settings.keycloak_distribution_list_path)

    async def search_users(self, query: str, limit: int) -> List[DirectoryEntry]:
        try:
            users = await self._admin.a_get_users({"search": query, "max": limit})
        except KeycloakError as e:
            logger.error(f"Keycloak user search failed for '{query}': {e}")
            raise DirectoryLookupError(f"Directory user search failed: {e}", {"query": query}) from e

        entries = [self._user_to_entry(user) for user in users if user.get("username")]
        return entries[:limit]

    async def search_groups(self, query: str, limit: int) -> List[DirectoryEntry]:
        groups = await self._search_group_tree(query, limit)
        entries = [
            self._group_to_entry(group)
            for group in groups
            if not self._is_distribution_list(group)
        ]
        return entries[:limit]

    async def search_distribution_lists(self, query: str, limit: int) -> List[DirectoryEntry]:
        groups = await self._search_group_tree(query, limit)
        entries = [
            self._group_to_entry(group)
            for group in groups
            if self._is_distribution_list(group)
        ]
        return entries[:limit]

    async def _search_group_tree(self, query: str, limit: int) -> List[Dict[str, Any]]:
        try:
            groups = await self._admin.a_get_groups({"search": query, "max": limit})
        except KeycloakError as e:
            logger.error(f"Keycloak group search failed for '{query}': {e}")
            raise DirectoryLookupError(f"Directory group search failed: {e}", {"query": query}) from e

        needle = query.casefold()
        return [
            group
            for group in self._flatten(groups)
            if needle in (group.get("name") or "").casefold()
        ]

    def _flatten(self, groups: Iterable[Dict[str, Any]]) -> Iterable[Dict[str, Any]]:
        # Search results come back as trees rooted at the top-level group.
        for group in groups:
            yield group
            yield from self._flatten(group.get("subGroups") or [])

    def _is_distribution_list(self, group: Dict[str, Any]) -> bool:
        path = group.get("path") or ""
        return path.startswith(self._distribution_list_path + "/")

    @staticmethod
    def _user_to_entry(user: Dict[str, Any]) -> DirectoryEntry:
        full_name = " ".join(
            part for part in (user.get("firstName"), user.get("lastName")) if part
        )
        return DirectoryEntry(
            identifier=user["username"],
            display_name=full_name or None,
            source=DirectorySource.KEYCLOAK,
            email=user.get("email"),
        )

    @staticmethod
    def _group_to_entry(group: Dict[str, Any]) -> DirectoryEntry:
        attributes: Dict[str, Any] = group.get("attributes") or {}
        display: Optional[List[str]] = attributes.get("displayName")
        return DirectoryEntry(
            identifier=group["name"],
            display_name=display[0] if display else group["name"],
            source=DirectorySource.KEYCLOAK,
            email=(attributes.get("email") or [None])[0],
        )
