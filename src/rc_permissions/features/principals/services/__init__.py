"""Principal services."""

from .principal_resolver import PrincipalResolver

__all__ = ["PrincipalResolver"]
