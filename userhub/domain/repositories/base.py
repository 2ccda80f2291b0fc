"""
Base Repository Interface.
Defines the standard contract for data access operations.
"""

from typing import TypeVar, List, Optional, Any, Dict, Protocol

T = TypeVar("T")


class BaseRepository(Protocol[T]):
    """Interface for generic CRUD operations."""

    def get_by_id(self, id: str) -> Optional[T]:
        """Get a single entity by ID."""
        ...

    def list(self) -> List[T]:
        """List all entities."""
        ...

    def create(self, data: Dict[str, Any]) -> T:
        """Create a new entity."""
        ...

    def update(self, id: str, fields: Dict[str, Any]) -> T:
        """Apply ``fields`` to the entity at ``id``."""
        ...

    def delete(self, id: str) -> Optional[T]:
        """Delete an entity by ID, returning what was removed."""
        ...
