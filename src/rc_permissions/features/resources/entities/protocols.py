"""Protocol interfaces for resource lookup."""

from abc import abstractmethod
from typing import Optional, Protocol, runtime_checkable

from .responsibility_centre import ResponsibilityCentre


@runtime_checkable
class ResourceStore(Protocol):
    """Protocol for reading Responsibility Centres."""

    @abstractmethod
    async def find_by_id(self, rc_id: int) -> Optional[ResponsibilityCentre]:
        """Find an RC, with its owner loaded."""
        ...
