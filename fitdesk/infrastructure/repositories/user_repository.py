"""
SQLAlchemy Implementation of User Repository.
"""

from typing import List, Optional

from fitdesk.domain.models.user import User
from fitdesk.domain.repositories.user_repository import UserRepository
from fitdesk.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyUserRepository(SQLAlchemyRepository[User], UserRepository):
    """User repository implementation using SQLAlchemy."""

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(User.email == email).first()

    def get_by_phone(self, phone_number: str) -> Optional[User]:
        return self.db.query(User).filter(User.phone_number == phone_number).first()

    def get_many(self, ids: List[int]) -> List[User]:
        if not ids:
            return []
        return self.db.query(User).filter(User.id.in_(ids)).all()
