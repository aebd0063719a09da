"""
Session Repository Interface.
Defines specific data access operations for training sessions.
"""

from datetime import date
from typing import List, Optional

from fitdesk.domain.repositories.base import BaseRepository
from fitdesk.domain.models.session import TrainingSession
from fitdesk.domain.schemas.session import SessionFilter


class SessionRepository(BaseRepository[TrainingSession]):
    """Interface for TrainingSession-specific operations."""

    def get_by_session_id(self, session_id: str) -> Optional[TrainingSession]:
        """Get a session by its public SESSION_ identifier."""
        ...

    def get_with_filters(self, filters: SessionFilter, today: date) -> List[TrainingSession]:
        """Get sessions matching filters, newest first."""
        ...

    def get_by_date(self, on: date) -> List[TrainingSession]:
        """Get sessions on a day ordered by starting time."""
        ...

    def get_by_date_range(self, start: date, end: date) -> List[TrainingSession]:
        """Get sessions in an inclusive date range, oldest first."""
        ...

    def get_by_user(self, user_id: int) -> List[TrainingSession]:
        """Get sessions a user participates in, newest first."""
        ...

    def get_upcoming(self, today: date, limit: int = 10) -> List[TrainingSession]:
        """Get scheduled or in-progress sessions from today on."""
        ...
