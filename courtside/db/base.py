from abc import ABC, abstractmethod
from typing import Optional, List, TypeVar, Generic

T = TypeVar('T')

class BaseRepository(ABC, Generic[T]):
    """Abstract base for all repositories."""

    @abstractmethod
    def get_by_id(self, entity_id: str) -> Optional[T]:
        """Retrieve a single entity by ID"""

    @abstractmethod
    def get_all(self) -> List[T]:
        """Retrieve all entities."""
        pass

    @abstractmethod
    def save(self, entity: T) -> None:
        """Save an entity (insert or update)."""
        pass

    @abstractmethod
    def delete(self, entity_id: str) -> bool:
        """Delete an entity. Returns True if deleted."""
        pass

    def exists(self, entity_id: str) -> bool:
        """Check if entity exists."""
        return self.get_by_id(entity_id) is not None
