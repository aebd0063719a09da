"""
Base Repository Interface.
Every FitDesk store (users, OTPs, sessions, payments) exposes this CRUD contract;
services depend on these protocols, never on SQLAlchemy directly.
"""

from typing import Any, List, Mapping, Optional, Protocol, TypeVar, Union

from pydantic import BaseModel

T = TypeVar("T")

# A pydantic schema (only fields that were set are applied) or a plain column mapping
Changes = Union[BaseModel, Mapping[str, Any]]


class BaseRepository(Protocol[T]):
    """Interface for generic CRUD operations."""

    def get_by_id(self, id: int) -> Optional[T]:
        ...

    def list(self, skip: int = 0, limit: int = 100) -> List[T]:
        """Entities ordered by primary key."""
        ...

    def create(self, obj_in: Changes) -> T:
        ...

    def update(self, db_obj: T, obj_in: Changes) -> T:
        """Apply ``obj_in`` onto ``db_obj`` and commit."""
        ...

    def save(self, db_obj: T) -> T:
        """Commit changes made directly on an entity, e.g. reassigned JSON columns."""
        ...

    def delete(self, id: int) -> Optional[T]:
        """Delete by ID; returns the removed entity or None."""
        ...
