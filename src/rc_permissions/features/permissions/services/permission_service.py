"""Responsibility Centre permission service.

Coordinates the resource, principal and grant stores to answer access
questions and to run the grant lifecycle. Every public operation runs in one
unit of work; mutations invalidate the access-level cache for the RC once the
unit of work has finished.
"""

import logging
from contextlib import nullcontext
from typing import List, Optional, Sequence

from ....config.constants import (
    AccessLevel,
    DefaultValues,
    GROUP_PRINCIPAL_TYPES,
    PrincipalType,
)
from ....core.exceptions import (
    AuthorizationError,
    CacheError,
    DuplicateGrantError,
    EntityAlreadyExistsError,
    NotFoundError,
    ValidationError,
)
from ...database.entities.protocols import TransactionManager
from ...principals.entities.principal import LocalPrincipal
from ...principals.services.principal_resolver import PrincipalResolver
from ...resources.entities.protocols import ResourceStore
from ...resources.entities.responsibility_centre import ResponsibilityCentre
from ..entities.access_grant import AccessGrant
from ..entities.protocols import AccessGrantStore, AccessLevelCache
from ..utils import messages
from ..utils.messages import duplicate_grant_message


logger = logging.getLogger(__name__)


class RCPermissionService:
    """Permission engine for Responsibility Centres."""

    def __init__(
        self,
        resources: ResourceStore,
        grants: AccessGrantStore,
        resolver: PrincipalResolver,
        transactions: Optional[TransactionManager] = None,
        cache: Optional[AccessLevelCache] = None,
        demo_rc_name: Optional[str] = DefaultValues.DEMO_RC_NAME,
        directory_search_limit: int = DefaultValues.DIRECTORY_SEARCH_LIMIT,
    ):
        self.resources = resources
        self.grants = grants
        self.resolver = resolver
        self.transactions = transactions
        self.cache = cache
        self.demo_rc_name = demo_rc_name
        self.directory_search_limit = directory_search_limit

    def _unit_of_work(self):
        if self.transactions is None:
            return nullcontext()
        return self.transactions.transaction()

    # Access queries

    async def is_owner(
        self,
        rc_id: int,
        identifier: str,
        group_memberships: Optional[Sequence[str]] = None,
    ) -> bool:
        """Check whether ``identifier`` owns the RC.

        True for the RC's primary owner and for any principal holding an
        OWNER grant. Group and distribution-list grants only count when the
        caller supplies the principal's memberships. A missing RC is never
        owned.
        """
        async with self._unit_of_work():
            rc = await self.resources.find_by_id(rc_id)
            if rc is None:
                return False
            return await self._is_owner_of(rc, identifier, group_memberships)

    async def get_effective_access_level(
        self,
        rc_id: int,
        identifier: str,
        group_memberships: Optional[Sequence[str]] = None,
    ) -> Optional[AccessLevel]:
        """Highest access level the principal holds on the RC, or None.

        Ownership short-circuits to OWNER. Otherwise the direct grant (by
        local account or by identifier) and every group or distribution-list
        grant matching ``group_memberships`` are merged and the highest rank
        wins.
        """
        groups = list(group_memberships or ())
        async with self._unit_of_work():
            rc = await self.resources.find_by_id(rc_id)
            if rc is None:
                return None
            return await self._cached_effective_level(rc, identifier, groups)

    async def can_edit_content(
        self,
        rc_id: int,
        identifier: str,
        group_memberships: Optional[Sequence[str]] = None,
    ) -> bool:
        level = await self.get_effective_access_level(rc_id, identifier, group_memberships)
        return level is not None and level.can_edit

    async def can_manage_rc(self, rc_id: int, identifier: str) -> bool:
        return await self.is_owner(rc_id, identifier)

    async def has_access(
        self,
        rc_id: int,
        identifier: str,
        group_memberships: Optional[Sequence[str]] = None,
    ) -> bool:
        """Whether the principal can see the RC at all. The demo RC is public."""
        groups = list(group_memberships or ())
        async with self._unit_of_work():
            rc = await self.resources.find_by_id(rc_id)
            if rc is None:
                return False
            if self._is_demo(rc):
                return True
            return await self._cached_effective_level(rc, identifier, groups) is not None

    async def get_permissions_for_rc(self, rc_id: int, requester: str) -> List[AccessGrant]:
        """List every grant on the RC, preceded by the primary owner's implicit entry.

        The implicit entry is left out when the owner also holds an explicit
        OWNER grant.

        Raises:
            NotFoundError: no RC with ``rc_id``.
            AuthorizationError: requester is not an owner of the RC.
        """
        async with self._unit_of_work():
            rc = await self._require_owned_rc(rc_id, requester, messages.ONLY_OWNERS_CAN_VIEW)
            explicit = await self.grants.find_by_resource(rc.id)

        owner_has_explicit_grant = any(
            grant.local_user_id == rc.owner.id and grant.is_owner_grant for grant in explicit
        )
        if owner_has_explicit_grant:
            return list(explicit)
        return [self._implicit_owner_grant(rc)] + list(explicit)

    # Grant lifecycle

    async def grant_user_access(
        self,
        rc_id: int,
        principal_identifier: str,
        access_level: AccessLevel,
        requester: str,
    ) -> AccessGrant:
        """Grant a user access to the RC.

        The target is a local account when one exists, otherwise the single
        directory user whose identifier matches. Directory users are stored
        by identifier and display name only.

        Raises:
            NotFoundError: no RC with ``rc_id``.
            AuthorizationError: requester is not an owner of the RC.
            ValidationError: the RC is protected, the user cannot be resolved
                or the grant would change the original owner's level.
            DuplicateGrantError: the user already has a grant on the RC.
        """
        async with self._unit_of_work():
            rc = await self._require_owned_rc(rc_id, requester, messages.ONLY_OWNERS_CAN_GRANT)
            self._ensure_modifiable(rc)

            target = await self.resolver.resolve_grant_target(
                principal_identifier, self.directory_search_limit
            )

            existing = await self._find_user_grant(rc.id, target.identifier, target.local_id)
            if existing is not None:
                raise self._duplicate(existing, principal_identifier, access_level)

            if target.local_id == rc.owner.id and access_level is not AccessLevel.OWNER:
                raise ValidationError(messages.ORIGINAL_OWNER_CHANGE)

            grant = AccessGrant(
                id=None,
                resource_id=rc.id,
                principal_identifier=target.identifier,
                principal_type=PrincipalType.USER,
                principal_display_name=target.display_name,
                access_level=access_level,
                local_user_id=target.local_id,
                granted_by=await self._local_id_of(requester),
                resource_name=rc.name,
            )
            try:
                created = await self.grants.create(grant)
            except EntityAlreadyExistsError:
                existing = await self._find_user_grant(rc.id, target.identifier, target.local_id)
                if existing is None:
                    raise
                raise self._duplicate(existing, principal_identifier, access_level)

        logger.info(
            f"Granted {access_level.value} on RC {rc.id} to user '{created.principal_identifier}' "
            f"({'local' if created.local_user_id else 'directory'}) by {requester}"
        )
        await self._invalidate(rc.id)
        return created

    async def grant_group_access(
        self,
        rc_id: int,
        principal_identifier: str,
        principal_display_name: Optional[str],
        principal_type: PrincipalType,
        access_level: AccessLevel,
        requester: str,
    ) -> AccessGrant:
        """Grant a group or distribution list access to the RC.

        Raises:
            NotFoundError: no RC with ``rc_id``.
            AuthorizationError: requester is not an owner of the RC.
            ValidationError: the RC is protected or ``principal_type`` is USER.
            DuplicateGrantError: the principal already has a grant on the RC.
        """
        async with self._unit_of_work():
            rc = await self._require_owned_rc(rc_id, requester, messages.ONLY_OWNERS_CAN_GRANT)
            self._ensure_modifiable(rc)

            if principal_type is PrincipalType.USER:
                raise ValidationError(messages.USER_PRINCIPAL_IN_GROUP_GRANT)
            if not principal_identifier or not principal_identifier.strip():
                raise ValidationError("Principal identifier is required")

            existing = await self.grants.find_by_resource_and_identifier(
                rc.id, principal_identifier, principal_type
            )
            if existing is not None:
                raise self._duplicate(existing, principal_identifier, access_level)

            grant = AccessGrant(
                id=None,
                resource_id=rc.id,
                principal_identifier=principal_identifier,
                principal_type=principal_type,
                principal_display_name=principal_display_name or principal_identifier,
                access_level=access_level,
                granted_by=await self._local_id_of(requester),
                resource_name=rc.name,
            )
            try:
                created = await self.grants.create(grant)
            except EntityAlreadyExistsError:
                existing = await self.grants.find_by_resource_and_identifier(
                    rc.id, principal_identifier, principal_type
                )
                if existing is None:
                    raise
                raise self._duplicate(existing, principal_identifier, access_level)

        logger.info(
            f"Granted {access_level.value} on RC {rc.id} to {principal_type.label.lower()} "
            f"'{principal_identifier}' by {requester}"
        )
        await self._invalidate(rc.id)
        return created

    async def update_permission(
        self, grant_id: int, new_level: AccessLevel, requester: str
    ) -> AccessGrant:
        """Change the access level of an existing grant in place.

        Raises:
            NotFoundError: no grant with ``grant_id``.
            AuthorizationError: requester is not an owner of the grant's RC.
            ValidationError: the RC is protected, the change would leave the
                RC without an owner, or the grant belongs to the original owner.
        """
        async with self._unit_of_work():
            grant = await self._require_grant(grant_id)
            rc = await self._require_owned_rc(
                grant.resource_id, requester, messages.ONLY_OWNERS_CAN_UPDATE
            )
            self._ensure_modifiable(rc)

            if grant.is_owner_grant and new_level is not AccessLevel.OWNER:
                await self._ensure_owner_remains(
                    rc, grant, requester, messages.SOLE_OWNER_SELF_DEMOTE
                )

            if grant.local_user_id is not None and grant.local_user_id == rc.owner.id:
                raise ValidationError(messages.ORIGINAL_OWNER_CHANGE)

            updated = await self.grants.update_access_level(grant.id, new_level)

        logger.info(
            f"Updated access {grant.id} on RC {rc.id} from {grant.access_level.value} "
            f"to {new_level.value} by {requester}"
        )
        await self._invalidate(rc.id)
        return updated

    async def revoke_access(self, grant_id: int, requester: str) -> None:
        """Delete a grant.

        Raises:
            NotFoundError: no grant with ``grant_id``.
            AuthorizationError: requester is not an owner of the grant's RC.
            ValidationError: the RC is protected, the grant belongs to the
                original owner, or it is the last remaining owner.
        """
        async with self._unit_of_work():
            grant = await self._require_grant(grant_id)
            rc = await self._require_owned_rc(
                grant.resource_id, requester, messages.ONLY_OWNERS_CAN_REVOKE
            )
            self._ensure_modifiable(rc)

            if grant.local_user_id is not None and grant.local_user_id == rc.owner.id:
                raise ValidationError(messages.ORIGINAL_OWNER_REVOKE)

            if grant.is_owner_grant:
                await self._ensure_owner_remains(
                    rc, grant, requester, messages.SOLE_OWNER_SELF_REMOVE
                )

            await self.grants.delete_by_id(grant.id)

        logger.info(f"Revoked access {grant.id} on RC {rc.id} by {requester}")
        await self._invalidate(rc.id)

    # Internals

    async def _is_owner_of(
        self,
        rc: ResponsibilityCentre,
        identifier: str,
        group_memberships: Optional[Sequence[str]] = None,
    ) -> bool:
        if not identifier:
            return False
        if rc.is_owned_by(identifier):
            return True

        local = await self.resolver.find_local(identifier)
        if local is not None and local.id == rc.owner.id:
            return True

        candidates = await self._matching_grants(rc.id, identifier, local, group_memberships or ())
        return any(grant.is_owner_grant for grant in candidates)

    async def _effective_level(
        self, rc: ResponsibilityCentre, identifier: str, group_memberships: Sequence[str]
    ) -> Optional[AccessLevel]:
        if not identifier:
            return None
        if rc.is_owned_by(identifier):
            return AccessLevel.OWNER

        local = await self.resolver.find_local(identifier)
        if local is not None and local.id == rc.owner.id:
            return AccessLevel.OWNER

        candidates = await self._matching_grants(rc.id, identifier, local, group_memberships)
        return AccessLevel.highest(grant.access_level for grant in candidates)

    async def _cached_effective_level(
        self, rc: ResponsibilityCentre, identifier: str, group_memberships: List[str]
    ) -> Optional[AccessLevel]:
        """Read-through lookup pinned to the RC's cache generation.

        The generation is read before the stores are consulted. A mutation
        that commits meanwhile bumps it, so the value computed here lands
        under a key no later reader asks for.
        """
        generation = None
        if self.cache is not None:
            try:
                generation = await self.cache.generation(rc.id)
                cached = await self.cache.get(rc.id, identifier, group_memberships, generation)
            except CacheError as e:
                logger.warning(f"Access cache read failed for RC {rc.id}: {e}")
                generation = None
                cached = None
            if cached is not None:
                return cached

        level = await self._effective_level(rc, identifier, group_memberships)

        if generation is not None and level is not None:
            try:
                await self.cache.set(rc.id, identifier, group_memberships, level, generation)
            except CacheError as e:
                logger.warning(f"Access cache write failed for RC {rc.id}: {e}")
        return level

    async def _matching_grants(
        self,
        rc_id: int,
        identifier: str,
        local: Optional[LocalPrincipal],
        group_memberships: Sequence[str],
    ) -> List[AccessGrant]:
        """Grants on the RC held directly by the principal or via its groups."""
        candidates: List[AccessGrant] = []
        if local is not None:
            by_account = await self.grants.find_by_resource_and_local_user(rc_id, local.id)
            if by_account is not None:
                candidates.append(by_account)

        by_identifier = await self.grants.find_by_resource_and_identifier(
            rc_id, identifier, PrincipalType.USER
        )
        if by_identifier is not None:
            candidates.append(by_identifier)

        if group_memberships:
            candidates.extend(
                await self.grants.find_by_principal_identifiers(
                    list(group_memberships), GROUP_PRINCIPAL_TYPES, resource_id=rc_id
                )
            )
        return candidates

    async def _require_owned_rc(
        self, rc_id: int, requester: str, denial: str
    ) -> ResponsibilityCentre:
        rc = await self.resources.find_by_id(rc_id)
        if rc is None:
            raise NotFoundError("RC", rc_id)
        if not await self._is_owner_of(rc, requester):
            logger.warning(f"Permission denied for '{requester}' on RC {rc_id}: {denial}")
            raise AuthorizationError(denial, requester=requester, resource_id=rc_id)
        return rc

    async def _require_grant(self, grant_id: int) -> AccessGrant:
        grant = await self.grants.find_by_id(grant_id)
        if grant is None:
            raise NotFoundError("Access record", grant_id)
        return grant

    def _is_demo(self, rc: ResponsibilityCentre) -> bool:
        return rc.is_named(self.demo_rc_name)

    def _ensure_modifiable(self, rc: ResponsibilityCentre) -> None:
        if self._is_demo(rc):
            raise ValidationError(messages.DEMO_RC_PROTECTED.format(name=rc.name))

    async def _ensure_owner_remains(
        self,
        rc: ResponsibilityCentre,
        grant: AccessGrant,
        requester: str,
        self_removal_message: str,
    ) -> None:
        """Refuse to drop an OWNER grant when it is the only owner left.

        The primary owner counts as an owner unless it already holds an
        explicit OWNER grant, which is then counted instead.
        """
        owner_grants = await self.grants.count_owners(rc.id)
        primary = await self.grants.find_by_resource_and_local_user(rc.id, rc.owner.id)
        primary_counted = primary is not None and primary.is_owner_grant
        effective_owners = owner_grants if primary_counted else owner_grants + 1
        if effective_owners > 1:
            return

        if await self._is_requesters_grant(grant, requester):
            raise ValidationError(self_removal_message)
        raise ValidationError(messages.LAST_OWNER_REMOVE)

    async def _is_requesters_grant(self, grant: AccessGrant, requester: str) -> bool:
        if grant.principal_type is not PrincipalType.USER:
            return False
        if grant.local_user_id is not None:
            return grant.local_user_id == await self._local_id_of(requester)
        # Directory identifiers resolve case-insensitively.
        return grant.principal_identifier.casefold() == (requester or "").casefold()

    async def _find_user_grant(
        self, rc_id: int, identifier: str, local_id: Optional[int]
    ) -> Optional[AccessGrant]:
        if local_id is not None:
            existing = await self.grants.find_by_resource_and_local_user(rc_id, local_id)
            if existing is not None:
                return existing
        return await self.grants.find_by_resource_and_identifier(
            rc_id, identifier, PrincipalType.USER
        )

    async def _local_id_of(self, identifier: str) -> Optional[int]:
        local = await self.resolver.find_local(identifier)
        return local.id if local is not None else None

    @staticmethod
    def _duplicate(
        existing: AccessGrant, identifier: str, requested: AccessLevel
    ) -> DuplicateGrantError:
        return DuplicateGrantError(
            duplicate_grant_message(existing.principal_type, identifier, existing.access_level, requested),
            principal_identifier=identifier,
            principal_type=existing.principal_type,
            existing_level=existing.access_level,
            requested_level=requested,
        )

    @staticmethod
    def _implicit_owner_grant(rc: ResponsibilityCentre) -> AccessGrant:
        return AccessGrant(
            id=None,
            resource_id=rc.id,
            principal_identifier=rc.owner.username,
            principal_type=PrincipalType.USER,
            principal_display_name=rc.owner.display_name,
            access_level=AccessLevel.OWNER,
            local_user_id=rc.owner.id,
            granted_at=rc.created_at,
            resource_name=rc.name,
        )

    async def _invalidate(self, rc_id: int) -> None:
        if self.cache is None:
            return
        try:
            await self.cache.invalidate_resource(rc_id)
        except CacheError as e:
            logger.warning(f"Access cache invalidation failed for RC {rc_id}: {e}")
