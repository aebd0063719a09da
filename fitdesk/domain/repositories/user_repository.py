"""
User Repository Interface.
Defines specific data access operations for Users.
"""

from typing import List, Optional

from fitdesk.domain.repositories.base import BaseRepository
from fitdesk.domain.models.user import User


class UserRepository(BaseRepository[User]):
    """Interface for User-specific operations."""

    def get_by_email(self, email: str) -> Optional[User]:
        """Get a user by email address."""
        ...

    def get_by_phone(self, phone_number: str) -> Optional[User]:
        """Get a user by WhatsApp phone number."""
        ...

    def get_many(self, ids: List[int]) -> List[User]:
        """Get all users whose ID is in ``ids``."""
        ...
