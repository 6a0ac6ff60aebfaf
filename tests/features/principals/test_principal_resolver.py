"""Tests for principal resolution."""

import pytest

from rc_permissions.config.constants import DirectorySource, PrincipalType
from rc_permissions.core.exceptions import ValidationError
from rc_permissions.features.principals.entities.principal import (
    DirectoryEntry,
    DirectoryPrincipal,
    LocalPrincipal,
)
from rc_permissions.features.principals.services.principal_resolver import PrincipalResolver


class TestResolve:
    """resolve() never consults the directory."""

    @pytest.mark.asyncio
    async def test_local_account_wins(self, resolver, bob, directory):
        principal = await resolver.resolve("bob")

        assert principal == bob
        assert principal.is_local
        assert directory.user_queries == []

    @pytest.mark.asyncio
    async def test_unknown_identifier_becomes_directory_principal(self, resolver, directory):
        principal = await resolver.resolve("amy")

        assert isinstance(principal, DirectoryPrincipal)
        assert principal.is_local is False
        assert principal.identifier == "amy"
        assert principal.display_name == "amy"
        assert principal.local_id is None
        assert directory.user_queries == []


class TestResolveGrantTarget:

    @pytest.mark.asyncio
    async def test_local_account_skips_directory(self, resolver, bob, directory):
        principal = await resolver.resolve_grant_target("bob")

        assert principal == bob
        assert directory.user_queries == []

    @pytest.mark.asyncio
    async def test_directory_match_keeps_display_name(self, resolver, directory):
        principal = await resolver.resolve_grant_target("amy")

        assert isinstance(principal, DirectoryPrincipal)
        assert principal.display_name == "Amy Wong"
        assert principal.source is DirectorySource.LDAP
        assert principal.email == "amy@example.org"
        assert directory.user_queries == ["amy"]

    @pytest.mark.asyncio
    async def test_match_is_case_insensitive(self, resolver):
        principal = await resolver.resolve_grant_target("AMY")

        assert principal.identifier == "amy"

    @pytest.mark.asyncio
    async def test_partial_match_is_not_enough(self, principal_store, directory):
        directory.users.append(DirectoryEntry("amyx", "Amy X", DirectorySource.LDAP))
        resolver = PrincipalResolver(principal_store, directory=directory)

        with pytest.raises(ValidationError) as exc_info:
            await resolver.resolve_grant_target("am")

        assert exc_info.value.message == "User not found: am"

    @pytest.mark.asyncio
    async def test_ambiguous_match_is_rejected(self, principal_store, directory):
        directory.users.append(DirectoryEntry("Amy", "Other Amy", DirectorySource.KEYCLOAK))
        resolver = PrincipalResolver(principal_store, directory=directory)

        with pytest.raises(ValidationError) as exc_info:
            await resolver.resolve_grant_target("amy")

        assert "ambiguous" in exc_info.value.message
        assert exc_info.value.details["matches"] == 2

    @pytest.mark.asyncio
    async def test_without_directory_unknown_user_is_not_found(self, principal_store):
        resolver = PrincipalResolver(principal_store)

        with pytest.raises(ValidationError) as exc_info:
            await resolver.resolve_grant_target("amy")

        assert exc_info.value.message == "User not found: amy"

    @pytest.mark.asyncio
    async def test_blank_identifier(self, resolver):
        with pytest.raises(ValidationError):
            await resolver.resolve_grant_target("   ")

    @pytest.mark.asyncio
    async def test_search_limit_is_passed_through(self, principal_store, directory):
        seen = []

        async def search_users(query, limit):
            seen.append(limit)
            return []

        directory.search_users = search_users
        resolver = PrincipalResolver(principal_store, directory=directory, search_limit=7)

        with pytest.raises(ValidationError):
            await resolver.resolve_grant_target("nobody")
        with pytest.raises(ValidationError):
            await resolver.resolve_grant_target("nobody", limit=3)

        assert seen == [7, 3]


class TestSearchDirectory:

    @pytest.mark.asyncio
    async def test_dispatches_by_principal_type(self, resolver):
        users = await resolver.search_directory("am", PrincipalType.USER)
        groups = await resolver.search_directory("finance", PrincipalType.GROUP)
        lists = await resolver.search_directory("budget", PrincipalType.DISTRIBUTION_LIST)

        assert [e.identifier for e in users] == ["amy"]
        assert [e.identifier for e in groups] == ["finance-team"]
        assert [e.identifier for e in lists] == ["budget-announce"]

    @pytest.mark.asyncio
    async def test_empty_without_directory_or_query(self, principal_store, resolver):
        assert await PrincipalResolver(principal_store).search_directory("amy") == []
        assert await resolver.search_directory("  ") == []


class TestPrincipalEntities:

    def test_local_display_name_falls_back_to_username(self, carol):
        assert carol.display_name == "carol"
        assert carol.identifier == "carol"
        assert carol.local_id == 3

    def test_local_principal_requires_username(self):
        with pytest.raises(ValueError):
            LocalPrincipal(id=1, username="")

    def test_directory_principal_requires_identifier(self):
        with pytest.raises(ValueError):
            DirectoryPrincipal(identifier="")

    def test_entry_matching_ignores_case(self):
        entry = DirectoryEntry("Amy.Wong", "Amy Wong", DirectorySource.LDAP)

        assert entry.matches("amy.wong")
        assert not entry.matches("amy")
