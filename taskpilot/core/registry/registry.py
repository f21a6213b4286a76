"""Base registry interface.

This module defines the abstract base class for registries, providing a
common interface for registration and retrieval.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar('T')


class BaseRegistry(ABC, Generic[T]):
    """Abstract base class for all registry types.

    Registries are explicit objects created at startup and passed by
    reference; they are not process-wide singletons.
    """

    @abstractmethod
    def register(self, obj: T) -> None:
        """Register an object with the registry.

        Args:
            obj: The object to register, keyed by its own name
        """
        pass

    @abstractmethod
    def get(self, name: str) -> Optional[T]:
        """Get an object by name.

        Args:
            name: Name of the object to retrieve

        Returns:
            The registered object, or None if absent
        """
        pass

    @abstractmethod
    def contains(self, name: str) -> bool:
        """Check if an object exists in the registry."""
        pass

    @abstractmethod
    def list(self, filter_criteria: Optional[Dict[str, Any]] = None) -> List[str]:
        """List registered names matching criteria.

        Args:
            filter_criteria: Optional criteria to filter results

        Returns:
            List of names in registration order
        """
        pass

    @abstractmethod
    def clear(self) -> None:
        """Clear all registrations from the registry."""
        pass

    @abstractmethod
    def remove(self, name: str) -> bool:
        """Remove a specific registration from the registry.

        Returns:
            True if the object was found and removed, False if not found
        """
        pass

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.contains(name)

    def __len__(self) -> int:
        return len(self.list())
