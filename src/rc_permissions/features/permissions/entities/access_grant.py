"""Access grant domain entity."""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from ....config.constants import AccessLevel, PrincipalType


@dataclass(frozen=True)
class AccessGrant:
    """A principal's access to one Responsibility Centre.

    ``id`` is None only for the primary-owner entry synthesized when listing
    an RC's permissions; that entry is never stored.
    """

    id: Optional[int]
    resource_id: int
    principal_identifier: str
    principal_type: PrincipalType
    principal_display_name: Optional[str]
    access_level: AccessLevel
    local_user_id: Optional[int] = None
    granted_by: Optional[int] = None
    granted_at: Optional[datetime] = None
    resource_name: Optional[str] = None

    def __post_init__(self):
        if not self.principal_identifier:
            raise ValueError("Access grant requires a principal identifier")
        if self.principal_type.is_group and self.local_user_id is not None:
            raise ValueError(
                f"{self.principal_type.label} grants cannot reference a local user"
            )

    @property
    def is_implicit(self) -> bool:
        return self.id is None

    @property
    def is_owner_grant(self) -> bool:
        return self.access_level is AccessLevel.OWNER

    @property
    def display_name(self) -> str:
        return self.principal_display_name or self.principal_identifier

    def with_level(self, access_level: AccessLevel) -> "AccessGrant":
        return replace(self, access_level=access_level)
