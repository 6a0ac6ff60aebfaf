"""User-facing messages produced by the permission engine."""

from ....config.constants import AccessLevel, PrincipalType


ONLY_OWNERS_CAN_GRANT = "Only owners can grant permissions"
ONLY_OWNERS_CAN_VIEW = "Only owners can view RC permissions"
ONLY_OWNERS_CAN_UPDATE = "Only owners can update permissions"
ONLY_OWNERS_CAN_REVOKE = "Only owners can revoke permissions"

DEMO_RC_PROTECTED = "Cannot modify permissions for {name} RC"
USER_PRINCIPAL_IN_GROUP_GRANT = "Use grant_user_access for user principals"

ORIGINAL_OWNER_CHANGE = "Cannot change access level for the original RC owner"
ORIGINAL_OWNER_REVOKE = "Cannot revoke access for the original RC owner"

SOLE_OWNER_SELF_DEMOTE = (
    "Cannot demote your own owner permissions when you are the sole owner. "
    "Grant owner access to another user first."
)
SOLE_OWNER_SELF_REMOVE = (
    "Cannot remove your own owner permissions when you are the sole owner. "
    "Grant owner access to another user first."
)
LAST_OWNER_REMOVE = "Cannot remove the last owner from an RC"


def duplicate_grant_message(
    principal_type: PrincipalType,
    identifier: str,
    existing_level: AccessLevel,
    requested_level: AccessLevel,
) -> str:
    """Describe an existing grant, hinting at update only if the level would change."""
    message = (
        f"{principal_type.label} '{identifier}' already has "
        f"{existing_level.value} access to this RC."
    )
    if requested_level is not existing_level:
        message += " Use update to change the access level."
    return message
