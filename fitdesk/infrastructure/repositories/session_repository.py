"""
SQLAlchemy Implementation of Session Repository.
"""

from datetime import date
from typing import List, Optional

from sqlalchemy import String, cast

from fitdesk.domain.models.session import ACTIVE_STATUSES, TrainingSession
from fitdesk.domain.repositories.session_repository import SessionRepository
from fitdesk.domain.schemas.session import SessionFilter
from fitdesk.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemySessionRepository(SQLAlchemyRepository[TrainingSession], SessionRepository):
    """Session repository implementation using SQLAlchemy."""

    def get_by_session_id(self, session_id: str) -> Optional[TrainingSession]:
        return self.db.query(TrainingSession).filter(TrainingSession.session_id == session_id).first()

    def get_with_filters(self, filters: SessionFilter, today: date) -> List[TrainingSession]:
        query = self.db.query(TrainingSession)

        if filters.upcoming:
            query = query.filter(
                TrainingSession.date >= today,
                TrainingSession.status.in_(ACTIVE_STATUSES),
            )
        else:
            if filters.date:
                query = query.filter(TrainingSession.date == filters.date)
            if filters.status:
                query = query.filter(TrainingSession.status == filters.status)
        if filters.trainer_id:
            query = query.filter(TrainingSession.trainer_id == filters.trainer_id)

        return query.order_by(TrainingSession.date.desc(), TrainingSession.starting_time.desc()).all()

    def get_by_date(self, on: date) -> List[TrainingSession]:
        return (
            self.db.query(TrainingSession)
            .filter(TrainingSession.date == on)
            .order_by(TrainingSession.starting_time.asc())
            .all()
        )

    def get_by_date_range(self, start: date, end: date) -> List[TrainingSession]:
        return (
            self.db.query(TrainingSession)
            .filter(TrainingSession.date.between(start, end))
            .order_by(TrainingSession.date.asc(), TrainingSession.starting_time.asc())
            .all()
        )

    def get_by_user(self, user_id: int) -> List[TrainingSession]:
        # JSON containment is dialect specific; the text match narrows, has_user decides
        sessions = (
            self.db.query(TrainingSession)
            .filter(cast(TrainingSession.users, String).contains(str(user_id)))
            .order_by(TrainingSession.date.desc(), TrainingSession.starting_time.desc())
            .all()
        )
        return [s for s in sessions if s.has_user(user_id)]

    def get_upcoming(self, today: date, limit: int = 10) -> List[TrainingSession]:
        return (
            self.db.query(TrainingSession)
            .filter(
                TrainingSession.date >= today,
                TrainingSession.status.in_(ACTIVE_STATUSES),
            )
            .order_by(TrainingSession.date.asc(), TrainingSession.starting_time.asc())
            .limit(limit)
            .all()
        )
