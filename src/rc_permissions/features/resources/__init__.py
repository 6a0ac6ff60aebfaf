"""Resources feature: Responsibility Centres as seen by the permission engine."""

from .entities import ResponsibilityCentre, ResourceStore
from .repositories import AsyncPGResponsibilityCentreRepository

__all__ = [
    "ResponsibilityCentre",
    "ResourceStore",
    "AsyncPGResponsibilityCentreRepository",
]
