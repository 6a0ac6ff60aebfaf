"""Principal entities package.

Domain entities and protocols for local and directory principals.
"""

from .principal import LocalPrincipal, DirectoryPrincipal, DirectoryEntry, Principal
from .protocols import PrincipalStore, DirectoryLookup

__all__ = [
    # Domain entities
    "LocalPrincipal",
    "DirectoryPrincipal",
    "DirectoryEntry",
    "Principal",

    # Protocols
    "PrincipalStore",
    "DirectoryLookup",
]
