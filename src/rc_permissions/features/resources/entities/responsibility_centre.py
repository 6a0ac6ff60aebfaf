"""Responsibility Centre domain entity."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ...principals.entities.principal import LocalPrincipal


@dataclass(frozen=True)
class ResponsibilityCentre:
    """A budget-tracking unit with exactly one owner.

    Ownership lives on the record itself and is never stored as a grant.
    """

    id: int
    name: str
    owner: LocalPrincipal
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    def is_owned_by(self, identifier: str) -> bool:
        return self.owner.username == identifier

    def is_named(self, name: Optional[str]) -> bool:
        return name is not None and self.name == name
