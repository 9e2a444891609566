"""
Activity catalog interface.
"""

from abc import ABC, abstractmethod


class IActivityCatalog(ABC):
    """Static catalog of activity definitions."""

    @abstractmethod
    def get_name_map(self) -> dict[str, str]:
        """Map of activity ID to display name."""
        pass
