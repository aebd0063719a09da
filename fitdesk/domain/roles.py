"""Closed role set derived from the user's stored flags."""

from enum import Enum


class Role(str, Enum):
    MEMBER = "member"
    TRAINER = "trainer"
    ADMIN = "admin"

    @classmethod
    def from_flags(cls, is_admin: bool, is_trainer: bool) -> "Role":
        if is_admin:
            return cls.ADMIN
        if is_trainer:
            return cls.TRAINER
        return cls.MEMBER

    @property
    def is_admin(self) -> bool:
        return self is Role.ADMIN

    @property
    def can_train(self) -> bool:
        """Trainers and admins may run sessions and record payments."""
        return self in (Role.TRAINER, Role.ADMIN)
