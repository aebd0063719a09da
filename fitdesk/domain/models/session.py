"""Training session — maps to the 'sessions' table."""

import enum
import secrets

from sqlalchemy import Column, Integer, String, Date, Time, DateTime, ForeignKey, Text, JSON, Enum
from sqlalchemy.sql import func

from fitdesk.infrastructure.database import Base


class SessionStatus(str, enum.Enum):
    SCHEDULED = "scheduled"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


# Allowed next states; terminal states have none.
SESSION_TRANSITIONS = {
    SessionStatus.SCHEDULED: {SessionStatus.IN_PROGRESS, SessionStatus.CANCELLED},
    SessionStatus.IN_PROGRESS: {SessionStatus.COMPLETED, SessionStatus.CANCELLED},
    SessionStatus.COMPLETED: set(),
    SessionStatus.CANCELLED: set(),
}

ACTIVE_STATUSES = (SessionStatus.SCHEDULED, SessionStatus.IN_PROGRESS)


def generate_session_id() -> str:
    return "SESSION_" + secrets.token_hex(8).upper()


def _enum_values(enum_cls):
    return [member.value for member in enum_cls]


class TrainingSession(Base):
    __tablename__ = "sessions"

    id = Column(Integer, primary_key=True, autoincrement=True)
    session_id = Column(String(40), unique=True, nullable=False, index=True, default=generate_session_id)
    person_count = Column(Integer, nullable=False)  # 1 or 2
    starting_time = Column(Time, nullable=False)
    date = Column(Date, nullable=False, index=True)
    users = Column(JSON, nullable=False, default=list)  # ordered participant user ids
    status = Column(
        Enum(SessionStatus, native_enum=False, values_callable=_enum_values, length=20),
        nullable=False,
        default=SessionStatus.SCHEDULED,
        index=True,
    )
    end_time = Column(Time, nullable=True)
    trainer_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def participants(self) -> list[int]:
        return list(self.users or [])

    def is_full(self) -> bool:
        return len(self.participants) >= self.person_count

    def has_user(self, user_id: int) -> bool:
        return user_id in self.participants

    def __repr__(self):
        return f"<TrainingSession {self.session_id} {self.date} {self.status}>"
