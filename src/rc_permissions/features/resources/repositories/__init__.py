"""Resource repositories."""

from .rc_repository import AsyncPGResponsibilityCentreRepository

__all__ = ["AsyncPGResponsibilityCentreRepository"]
