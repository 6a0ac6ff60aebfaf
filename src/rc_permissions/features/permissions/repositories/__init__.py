"""Permission repositories."""

from .grant_repository import AsyncPGAccessGrantRepository

__all__ = ["AsyncPGAccessGrantRepository"]
