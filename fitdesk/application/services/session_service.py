"""Session service — scheduling, participant capacity and status transitions."""

from datetime import date, datetime
from typing import Iterable, List

import pytz
import structlog

from fitdesk.config import get_settings
from fitdesk.core.exceptions import ConflictError, NotFoundError, SessionFullError, ValidationError
from fitdesk.domain.models.session import SESSION_TRANSITIONS, SessionStatus, TrainingSession
from fitdesk.domain.repositories.session_repository import SessionRepository
from fitdesk.domain.repositories.user_repository import UserRepository
from fitdesk.domain.schemas.session import SessionCreate, SessionFilter, SessionUpdate

settings = get_settings()
tz = pytz.timezone(settings.TIMEZONE)
logger = structlog.get_logger(__name__)

NON_NULLABLE_FIELDS = ("person_count", "starting_time", "date", "users")


def get_current_date() -> date:
    """Get current date in the configured timezone."""
    return datetime.now(tz).date()


def _validate_users(users: UserRepository, user_ids: Iterable[int]) -> None:
    ids = list(user_ids)
    found = {u.id for u in users.get_many(ids)}
    for user_id in ids:
        if user_id not in found:
            raise ValidationError(f"User not found with ID: {user_id}")


def _validate_trainer(users: UserRepository, trainer_id: int) -> None:
    trainer = users.get_by_id(trainer_id)
    if trainer is None or not trainer.role.can_train:
        raise ValidationError("Invalid trainer ID or user is not a trainer")


def get_session(repo: SessionRepository, id: int) -> TrainingSession:
    session = repo.get_by_id(id)
    if session is None:
        raise NotFoundError("Session not found")
    return session


def get_session_by_session_id(repo: SessionRepository, session_id: str) -> TrainingSession:
    session = repo.get_by_session_id(session_id)
    if session is None:
        raise NotFoundError("Session not found")
    return session


def list_sessions(repo: SessionRepository, filters: SessionFilter) -> List[TrainingSession]:
    return repo.get_with_filters(filters, get_current_date())


def get_sessions_by_date_range(repo: SessionRepository, start: date, end: date) -> List[TrainingSession]:
    if start > end:
        raise ValidationError("Start date must not be after end date")
    return repo.get_by_date_range(start, end)


def get_upcoming_sessions(repo: SessionRepository, limit: int = 10) -> List[TrainingSession]:
    return repo.get_upcoming(get_current_date(), limit)


def create_session(repo: SessionRepository, users: UserRepository, body: SessionCreate) -> TrainingSession:
    _validate_users(users, body.users)
    if body.trainer_id is not None:
        _validate_trainer(users, body.trainer_id)

    session = repo.create(body.model_dump())
    logger.info("Session created", session_id=session.session_id, date=str(session.date))
    return session


def update_session(
    repo: SessionRepository,
    users: UserRepository,
    id: int,
    body: SessionUpdate,
) -> TrainingSession:
    session = get_session(repo, id)
    changes = body.model_dump(exclude_unset=True)
    for field in NON_NULLABLE_FIELDS:
        if field in changes and changes[field] is None:
            del changes[field]

    capacity = changes.get("person_count") or session.person_count
    if "person_count" in changes and len(session.participants) > capacity:
        raise ConflictError(
            f"Cannot reduce person count. Session already has {len(session.participants)} user(s)"
        )

    if changes.get("users") is not None:
        new_users = changes["users"]
        if len(new_users) > capacity:
            raise ConflictError(f"Cannot add more than {capacity} user(s) to this session")
        if len(set(new_users)) != len(new_users):
            raise ValidationError("Duplicate user IDs in session")
        _validate_users(users, new_users)

    if changes.get("trainer_id") is not None:
        _validate_trainer(users, changes["trainer_id"])

    return repo.update(session, changes)


def add_participant(
    repo: SessionRepository,
    users: UserRepository,
    id: int,
    user_id: int,
) -> TrainingSession:
    session = get_session(repo, id)
    if users.get_by_id(user_id) is None:
        raise ValidationError("User not found")

    if session.has_user(user_id):
        return session
    if session.is_full():
        raise SessionFullError(session.person_count)

    # JSON columns only track reassignment, not in-place mutation
    session.users = session.participants + [user_id]
    session = repo.save(session)
    logger.info("Participant added", session_id=session.session_id, user_id=user_id)
    return session


def remove_participant(repo: SessionRepository, id: int, user_id: int) -> TrainingSession:
    session = get_session(repo, id)
    if not session.has_user(user_id):
        return session

    session.users = [uid for uid in session.participants if uid != user_id]
    session = repo.save(session)
    logger.info("Participant removed", session_id=session.session_id, user_id=user_id)
    return session


def update_status(repo: SessionRepository, id: int, status: SessionStatus) -> TrainingSession:
    session = get_session(repo, id)
    current = SessionStatus(session.status)
    if status == current:
        return session
    if status not in SESSION_TRANSITIONS[current]:
        raise ConflictError(f"Cannot change session status from {current.value} to {status.value}")

    session.status = status
    session = repo.save(session)
    logger.info("Session status changed", session_id=session.session_id, old=current.value, new=status.value)
    return session


def delete_session(repo: SessionRepository, id: int) -> None:
    session = get_session(repo, id)
    session_id = session.session_id
    repo.delete(session.id)
    logger.info("Session deleted", session_id=session_id)


def sessions_for_user(repo: SessionRepository, user_id: int) -> List[TrainingSession]:
    return repo.get_by_user(user_id)


def sessions_on(repo: SessionRepository, on: date) -> List[TrainingSession]:
    return repo.get_by_date(on)
