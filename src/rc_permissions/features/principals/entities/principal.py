"""Principal domain entities.

A principal is either a local account or an identity that is only known to
the external directory. The two variants deliberately share no base record;
code that needs to tell them apart checks ``is_local`` or uses isinstance.
"""

from dataclasses import dataclass
from typing import Optional, Union

from ....config.constants import DirectorySource


@dataclass(frozen=True)
class LocalPrincipal:
    """A user account stored in the application database."""

    id: int
    username: str
    full_name: Optional[str] = None

    is_local = True

    def __post_init__(self):
        if not self.username:
            raise ValueError("Local principal requires a username")

    @property
    def identifier(self) -> str:
        return self.username

    @property
    def local_id(self) -> int:
        return self.id

    @property
    def display_name(self) -> str:
        """Full name when known, otherwise the username."""
        return self.full_name or self.username


@dataclass(frozen=True)
class DirectoryPrincipal:
    """An identity known only by its directory identifier.

    Never mirrored into the users table by the permission engine.
    """

    identifier: str
    display_name_hint: Optional[str] = None
    source: Optional[DirectorySource] = None
    email: Optional[str] = None

    is_local = False

    def __post_init__(self):
        if not self.identifier:
            raise ValueError("Directory principal requires an identifier")

    @property
    def local_id(self) -> None:
        return None

    @property
    def display_name(self) -> str:
        """Directory display name, falling back to the identifier itself."""
        return self.display_name_hint or self.identifier


Principal = Union[LocalPrincipal, DirectoryPrincipal]


@dataclass(frozen=True)
class DirectoryEntry:
    """A single result returned by a directory search."""

    identifier: str
    display_name: Optional[str]
    source: DirectorySource
    email: Optional[str] = None

    def matches(self, identifier: str) -> bool:
        """Case-insensitive identifier comparison used to pick exact matches."""
        return self.identifier.casefold() == identifier.casefold()

    def to_principal(self) -> DirectoryPrincipal:
        return DirectoryPrincipal(
            identifier=self.identifier,
            display_name_hint=self.display_name,
            source=self.source,
            email=self.email,
        )
