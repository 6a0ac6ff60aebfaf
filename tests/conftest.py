"""Pytest configuration and fixtures for rc-permissions tests."""

from dataclasses import replace
from datetime import datetime, timezone
from itertools import count
from typing import Dict, List, Optional, Sequence
from unittest.mock import AsyncMock

import pytest

from rc_permissions.config.constants import AccessLevel, DirectorySource, PrincipalType
from rc_permissions.core.exceptions import EntityAlreadyExistsError, NotFoundError
from rc_permissions.features.permissions.entities.access_grant import AccessGrant
from rc_permissions.features.permissions.services.permission_service import RCPermissionService
from rc_permissions.features.principals.entities.principal import DirectoryEntry, LocalPrincipal
from rc_permissions.features.principals.services.principal_resolver import PrincipalResolver
from rc_permissions.features.resources.entities.responsibility_centre import ResponsibilityCentre


CREATED_AT = datetime(2024, 1, 15, 9, 30, tzinfo=timezone.utc)


class InMemoryPrincipalStore:
    """PrincipalStore over a dict keyed by username."""

    def __init__(self, principals: Sequence[LocalPrincipal] = ()):
        self.principals: Dict[str, LocalPrincipal] = {p.username: p for p in principals}

    async def find_by_identifier(self, identifier: str) -> Optional[LocalPrincipal]:
        return self.principals.get(identifier)

    async def find_by_id(self, user_id: int) -> Optional[LocalPrincipal]:
        return next((p for p in self.principals.values() if p.id == user_id), None)


class InMemoryResourceStore:
    """ResourceStore over a dict keyed by RC id."""

    def __init__(self, centres: Sequence[ResponsibilityCentre] = ()):
        self.centres: Dict[int, ResponsibilityCentre] = {rc.id: rc for rc in centres}

    async def find_by_id(self, rc_id: int) -> Optional[ResponsibilityCentre]:
        return self.centres.get(rc_id)


class InMemoryGrantStore:
    """AccessGrantStore enforcing the same uniqueness rules as rc_access."""

    def __init__(self):
        self.grants: Dict[int, AccessGrant] = {}
        self._ids = count(1)

    async def find_by_id(self, grant_id: int) -> Optional[AccessGrant]:
        return self.grants.get(grant_id)

    async def find_by_resource(self, resource_id: int) -> List[AccessGrant]:
        return [g for g in self.grants.values() if g.resource_id == resource_id]

    async def find_by_resource_and_local_user(self, resource_id, local_user_id):
        return next(
            (
                g for g in self.grants.values()
                if g.resource_id == resource_id and g.local_user_id == local_user_id
            ),
            None,
        )

    async def find_by_resource_and_identifier(self, resource_id, principal_identifier, principal_type):
        return next(
            (
                g for g in self.grants.values()
                if g.resource_id == resource_id
                and g.principal_identifier == principal_identifier
                and g.principal_type is principal_type
            ),
            None,
        )

    async def find_by_principal_identifiers(self, identifiers, principal_types, resource_id=None):
        return [
            g for g in self.grants.values()
            if g.principal_identifier in identifiers
            and g.principal_type in principal_types
            and (resource_id is None or g.resource_id == resource_id)
        ]

    async def count_owners(self, resource_id: int) -> int:
        return sum(
            1 for g in self.grants.values()
            if g.resource_id == resource_id and g.access_level is AccessLevel.OWNER
        )

    async def create(self, grant: AccessGrant) -> AccessGrant:
        for existing in self.grants.values():
            if existing.resource_id != grant.resource_id:
                continue
            same_principal = (
                existing.principal_identifier == grant.principal_identifier
                and existing.principal_type is grant.principal_type
            )
            same_user = grant.local_user_id is not None and existing.local_user_id == grant.local_user_id
            if same_principal or same_user:
                raise EntityAlreadyExistsError("AccessGrant", grant.principal_identifier)

        stored = replace(grant, id=next(self._ids), granted_at=datetime.now(timezone.utc))
        self.grants[stored.id] = stored
        return stored

    async def update_access_level(self, grant_id: int, access_level: AccessLevel) -> AccessGrant:
        if grant_id not in self.grants:
            raise NotFoundError("Access record", grant_id)
        self.grants[grant_id] = self.grants[grant_id].with_level(access_level)
        return self.grants[grant_id]

    async def delete_by_id(self, grant_id: int) -> bool:
        return self.grants.pop(grant_id, None) is not None


class InMemoryDirectory:
    """DirectoryLookup returning canned entries filtered by substring."""

    def __init__(self, users=(), groups=(), distribution_lists=()):
        self.users = list(users)
        self.groups = list(groups)
        self.distribution_lists = list(distribution_lists)
        self.user_queries: List[str] = []

    @staticmethod
    def _filter(entries, query, limit):
        needle = query.casefold()
        return [e for e in entries if needle in e.identifier.casefold()][:limit]

    async def search_users(self, query, limit):
        self.user_queries.append(query)
        return self._filter(self.users, query, limit)

    async def search_groups(self, query, limit):
        return self._filter(self.groups, query, limit)

    async def search_distribution_lists(self, query, limit):
        return self._filter(self.distribution_lists, query, limit)


class InMemoryAccessCache:
    """AccessLevelCache over plain dicts, keyed like the Redis adapter."""

    def __init__(self):
        self.entries: Dict[tuple, AccessLevel] = {}
        self.generations: Dict[int, int] = {}

    @staticmethod
    def _key(rc_id, identifier, group_memberships, generation):
        return (rc_id, generation, identifier, tuple(sorted(set(group_memberships))))

    async def generation(self, rc_id):
        return self.generations.get(rc_id, 0)

    async def get(self, rc_id, identifier, group_memberships, generation):
        return self.entries.get(self._key(rc_id, identifier, group_memberships, generation))

    async def set(self, rc_id, identifier, group_memberships, level, generation):
        self.entries[self._key(rc_id, identifier, group_memberships, generation)] = level

    async def invalidate_resource(self, rc_id):
        self.generations[rc_id] = self.generations.get(rc_id, 0) + 1
        for key in [k for k in self.entries if k[0] == rc_id]:
            del self.entries[key]


@pytest.fixture
def alice():
    return LocalPrincipal(id=1, username="alice", full_name="Alice Anders")


@pytest.fixture
def bob():
    return LocalPrincipal(id=2, username="bob", full_name="Bob Brown")


@pytest.fixture
def carol():
    return LocalPrincipal(id=3, username="carol", full_name=None)


@pytest.fixture
def principal_store(alice, bob, carol):
    return InMemoryPrincipalStore([alice, bob, carol])


@pytest.fixture
def operations_rc(alice):
    """RC #1, owned by alice."""
    return ResponsibilityCentre(
        id=1, name="Operations", owner=alice, description="Ops budget", created_at=CREATED_AT
    )


@pytest.fixture
def demo_rc(alice):
    return ResponsibilityCentre(id=2, name="Demo", owner=alice, created_at=CREATED_AT)


@pytest.fixture
def resource_store(operations_rc, demo_rc):
    return InMemoryResourceStore([operations_rc, demo_rc])


@pytest.fixture
def grant_store():
    return InMemoryGrantStore()


@pytest.fixture
def directory():
    return InMemoryDirectory(
        users=[
            DirectoryEntry("amy", "Amy Wong", DirectorySource.LDAP, "amy@example.org"),
            DirectoryEntry("dave", None, DirectorySource.LDAP),
        ],
        groups=[
            DirectoryEntry("finance-team", "Finance Team", DirectorySource.LDAP),
        ],
        distribution_lists=[
            DirectoryEntry("budget-announce", "Budget Announcements", DirectorySource.LDAP),
        ],
    )


@pytest.fixture
def resolver(principal_store, directory):
    return PrincipalResolver(principal_store, directory=directory)


@pytest.fixture
def permission_service(resource_store, grant_store, resolver):
    return RCPermissionService(
        resources=resource_store,
        grants=grant_store,
        resolver=resolver,
    )


@pytest.fixture
def access_cache():
    return InMemoryAccessCache()


@pytest.fixture
def mock_database_repository():
    """Mock database repository for repository tests."""
    mock_db = AsyncMock()
    mock_db.fetchrow = AsyncMock()
    mock_db.fetch = AsyncMock()
    mock_db.fetchval = AsyncMock()
    mock_db.execute = AsyncMock()
    return mock_db
