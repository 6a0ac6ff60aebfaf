"""Resource entities package."""

from .responsibility_centre import ResponsibilityCentre
from .protocols import ResourceStore

__all__ = [
    "ResponsibilityCentre",
    "ResourceStore",
]
