"""Tests for the asyncpg access grant repository."""

from datetime import datetime, timezone

import asyncpg
import pytest

from rc_permissions.config.constants import AccessLevel, PrincipalType
from rc_permissions.core.exceptions import DatabaseError, EntityAlreadyExistsError, NotFoundError
from rc_permissions.features.permissions.entities.access_grant import AccessGrant
from rc_permissions.features.permissions.repositories.grant_repository import (
    AsyncPGAccessGrantRepository,
)


GRANTED_AT = datetime(2024, 5, 2, 12, 0, tzinfo=timezone.utc)


def grant_row(**overrides):
    row = {
        "id": 10,
        "responsibility_centre_id": 1,
        "user_id": None,
        "access_level": "READ_WRITE",
        "granted_at": GRANTED_AT,
        "principal_type": "USER",
        "principal_identifier": "amy",
        "principal_display_name": "Amy Wong",
        "granted_by_id": 1,
        "resource_name": "Operations",
    }
    row.update(overrides)
    return row


@pytest.fixture
def repository(mock_database_repository):
    return AsyncPGAccessGrantRepository(mock_database_repository, schema="budget")


@pytest.fixture
def new_grant():
    return AccessGrant(
        id=None,
        resource_id=1,
        principal_identifier="finance-team",
        principal_type=PrincipalType.GROUP,
        principal_display_name="Finance Team",
        access_level=AccessLevel.READ_ONLY,
        granted_by=1,
    )


class TestGrantQueries:

    @pytest.mark.asyncio
    async def test_find_by_id_maps_row(self, repository, mock_database_repository):
        mock_database_repository.fetchrow.return_value = grant_row()

        grant = await repository.find_by_id(10)

        assert grant.id == 10
        assert grant.resource_id == 1
        assert grant.principal_type is PrincipalType.USER
        assert grant.access_level is AccessLevel.READ_WRITE
        assert grant.local_user_id is None
        assert grant.granted_by == 1
        assert grant.resource_name == "Operations"
        assert "budget.rc_access" in mock_database_repository.fetchrow.call_args.args[0]

    @pytest.mark.asyncio
    async def test_find_by_id_missing(self, repository, mock_database_repository):
        mock_database_repository.fetchrow.return_value = None

        assert await repository.find_by_id(10) is None

    @pytest.mark.asyncio
    async def test_find_by_resource(self, repository, mock_database_repository):
        mock_database_repository.fetch.return_value = [
            grant_row(),
            grant_row(id=11, principal_type="GROUP", principal_identifier="finance-team"),
        ]

        grants = await repository.find_by_resource(1)

        assert [g.id for g in grants] == [10, 11]
        assert grants[1].principal_type is PrincipalType.GROUP

    @pytest.mark.asyncio
    async def test_find_by_identifier_passes_type_value(self, repository, mock_database_repository):
        mock_database_repository.fetchrow.return_value = None

        await repository.find_by_resource_and_identifier(1, "finance-team", PrincipalType.GROUP)

        args = mock_database_repository.fetchrow.call_args.args
        assert args[1:] == (1, "finance-team", "GROUP")

    @pytest.mark.asyncio
    async def test_find_by_principal_identifiers(self, repository, mock_database_repository):
        mock_database_repository.fetch.return_value = [grant_row(principal_type="DISTRIBUTION_LIST")]

        grants = await repository.find_by_principal_identifiers(
            ("budget-announce",),
            (PrincipalType.GROUP, PrincipalType.DISTRIBUTION_LIST),
            resource_id=1,
        )

        assert len(grants) == 1
        args = mock_database_repository.fetch.call_args.args
        assert args[1:] == (["budget-announce"], ["GROUP", "DISTRIBUTION_LIST"], 1)

    @pytest.mark.asyncio
    async def test_find_by_principal_identifiers_empty(self, repository, mock_database_repository):
        assert await repository.find_by_principal_identifiers([], [PrincipalType.GROUP]) == []
        mock_database_repository.fetch.assert_not_called()

    @pytest.mark.asyncio
    async def test_count_owners(self, repository, mock_database_repository):
        mock_database_repository.fetchval.return_value = 2

        assert await repository.count_owners(1) == 2


class TestGrantMutations:

    @pytest.mark.asyncio
    async def test_create_returns_persisted_grant(self, repository, mock_database_repository, new_grant):
        mock_database_repository.fetchrow.return_value = {"id": 12, "granted_at": GRANTED_AT}

        created = await repository.create(new_grant)

        assert created.id == 12
        assert created.granted_at == GRANTED_AT
        assert created.principal_identifier == "finance-team"
        query, *params = mock_database_repository.fetchrow.call_args.args
        assert "ON CONFLICT DO NOTHING" in query
        assert params == [1, None, "READ_ONLY", "GROUP", "finance-team", "Finance Team", 1]

    @pytest.mark.asyncio
    async def test_create_conflict_without_row(self, repository, mock_database_repository, new_grant):
        mock_database_repository.fetchrow.return_value = None

        with pytest.raises(EntityAlreadyExistsError):
            await repository.create(new_grant)

    @pytest.mark.asyncio
    async def test_create_unique_violation(self, repository, mock_database_repository, new_grant):
        mock_database_repository.fetchrow.side_effect = asyncpg.UniqueViolationError("duplicate key")

        with pytest.raises(EntityAlreadyExistsError) as exc_info:
            await repository.create(new_grant)

        assert exc_info.value.entity_type == "AccessGrant"

    @pytest.mark.asyncio
    async def test_create_other_driver_error(self, repository, mock_database_repository, new_grant):
        mock_database_repository.fetchrow.side_effect = asyncpg.PostgresError("disk full")

        with pytest.raises(DatabaseError) as exc_info:
            await repository.create(new_grant)

        assert not isinstance(exc_info.value, EntityAlreadyExistsError)
        assert exc_info.value.details == {"operation": "create access grant"}

    @pytest.mark.asyncio
    async def test_update_access_level(self, repository, mock_database_repository):
        mock_database_repository.fetchval.return_value = 10
        mock_database_repository.fetchrow.return_value = grant_row(access_level="OWNER")

        grant = await repository.update_access_level(10, AccessLevel.OWNER)

        assert grant.access_level is AccessLevel.OWNER
        assert mock_database_repository.fetchval.call_args.args[1:] == (10, "OWNER")

    @pytest.mark.asyncio
    async def test_update_missing_grant(self, repository, mock_database_repository):
        mock_database_repository.fetchval.return_value = None

        with pytest.raises(NotFoundError):
            await repository.update_access_level(10, AccessLevel.OWNER)

    @pytest.mark.asyncio
    async def test_delete_by_id(self, repository, mock_database_repository):
        mock_database_repository.fetchval.side_effect = [10, None]

        assert await repository.delete_by_id(10) is True
        assert await repository.delete_by_id(10) is False

    @pytest.mark.asyncio
    async def test_ensure_table_creates_indexes(self, repository, mock_database_repository):
        await repository.ensure_table()

        statements = [call.args[0] for call in mock_database_repository.execute.call_args_list]
        assert "CREATE TABLE IF NOT EXISTS budget.rc_access" in statements[0]
        assert "ON DELETE CASCADE" in statements[0]
        assert any("uq_rc_access_principal" in s for s in statements)
        assert any("uq_rc_access_user" in s for s in statements)


class TestAccessGrantEntity:

    def test_group_grant_cannot_reference_local_user(self):
        with pytest.raises(ValueError):
            AccessGrant(
                id=None,
                resource_id=1,
                principal_identifier="finance-team",
                principal_type=PrincipalType.GROUP,
                principal_display_name=None,
                access_level=AccessLevel.READ_ONLY,
                local_user_id=5,
            )

    def test_display_name_fallback(self, new_grant):
        nameless = AccessGrant(
            id=3,
            resource_id=1,
            principal_identifier="dave",
            principal_type=PrincipalType.USER,
            principal_display_name=None,
            access_level=AccessLevel.READ_ONLY,
        )

        assert nameless.display_name == "dave"
        assert not nameless.is_implicit
        assert new_grant.is_implicit
        assert new_grant.with_level(AccessLevel.OWNER).is_owner_grant
