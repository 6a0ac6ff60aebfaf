"""Principal repositories."""

from .principal_repository import AsyncPGPrincipalRepository

__all__ = ["AsyncPGPrincipalRepository"]
