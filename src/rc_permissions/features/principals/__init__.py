"""Principals feature.

Local accounts, directory identities and the resolver that tells them apart.
"""

from .entities import (
    LocalPrincipal,
    DirectoryPrincipal,
    DirectoryEntry,
    Principal,
    PrincipalStore,
    DirectoryLookup,
)
from .repositories import AsyncPGPrincipalRepository
from .services import PrincipalResolver

__all__ = [
    "LocalPrincipal",
    "DirectoryPrincipal",
    "DirectoryEntry",
    "Principal",
    "PrincipalStore",
    "DirectoryLookup",
    "AsyncPGPrincipalRepository",
    "PrincipalResolver",
]
