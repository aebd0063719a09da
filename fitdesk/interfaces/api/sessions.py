"""Session API routes — scheduling, participants and status."""

import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from fitdesk.application.services.session_service import (
    add_participant,
    create_session,
    delete_session,
    get_session,
    get_session_by_session_id,
    get_sessions_by_date_range,
    get_upcoming_sessions,
    list_sessions,
    remove_participant,
    sessions_for_user,
    sessions_on,
    update_session,
    update_status,
)
from fitdesk.domain.models.session import SessionStatus
from fitdesk.domain.models.user import User
from fitdesk.domain.repositories.session_repository import SessionRepository
from fitdesk.domain.repositories.user_repository import UserRepository
from fitdesk.domain.schemas.session import (
    SessionCreate,
    SessionFilter,
    SessionParticipant,
    SessionRead,
    SessionStatusUpdate,
    SessionUpdate,
)
from fitdesk.interfaces.api.deps import get_current_user, require_admin, require_trainer
from fitdesk.interfaces.deps import get_session_repository, get_user_repository

router = APIRouter(prefix="/api/sessions", tags=["Sessions"])


def _one(session, message: Optional[str] = None) -> dict:
    body = {"success": True, "data": SessionRead.model_validate(session)}
    if message:
        body["message"] = message
    return body


def _many(sessions) -> dict:
    return {"success": True, "count": len(sessions), "data": [SessionRead.model_validate(s) for s in sessions]}


@router.get("/upcoming")
def upcoming_sessions(
    limit: int = Query(10, ge=1, le=100),
    repo: SessionRepository = Depends(get_session_repository),
):
    """Public: next scheduled or running sessions."""
    return _many(get_upcoming_sessions(repo, limit))


@router.post("", status_code=status.HTTP_201_CREATED)
def new_session(
    body: SessionCreate,
    repo: SessionRepository = Depends(get_session_repository),
    users: UserRepository = Depends(get_user_repository),
    trainer: User = Depends(require_trainer),
):
    return _one(create_session(repo, users, body), "Session created successfully")


@router.get("")
def all_sessions(
    date: Optional[datetime.date] = None,
    status: Optional[SessionStatus] = None,
    trainer_id: Optional[int] = None,
    upcoming: bool = False,
    repo: SessionRepository = Depends(get_session_repository),
    user: User = Depends(get_current_user),
):
    """List sessions with filtering; ``upcoming`` overrides date and status."""
    filters = SessionFilter(date=date, status=status, trainer_id=trainer_id, upcoming=upcoming)
    return _many(list_sessions(repo, filters))


@router.get("/date-range")
def sessions_in_range(
    start_date: datetime.date,
    end_date: datetime.date,
    repo: SessionRepository = Depends(get_session_repository),
    user: User = Depends(get_current_user),
):
    return _many(get_sessions_by_date_range(repo, start_date, end_date))


@router.get("/date/{date}")
def sessions_on_date(
    date: datetime.date,
    repo: SessionRepository = Depends(get_session_repository),
    user: User = Depends(get_current_user),
):
    return _many(sessions_on(repo, date))


@router.get("/user/{user_id}")
def sessions_of_user(
    user_id: int,
    repo: SessionRepository = Depends(get_session_repository),
    user: User = Depends(get_current_user),
):
    return _many(sessions_for_user(repo, user_id))


@router.get("/session/{session_id}")
def session_by_public_id(
    session_id: str,
    repo: SessionRepository = Depends(get_session_repository),
    user: User = Depends(get_current_user),
):
    return _one(get_session_by_session_id(repo, session_id))


@router.get("/{id}")
def session_by_id(
    id: int,
    repo: SessionRepository = Depends(get_session_repository),
    user: User = Depends(get_current_user),
):
    return _one(get_session(repo, id))


@router.put("/{id}")
def edit_session(
    id: int,
    body: SessionUpdate,
    repo: SessionRepository = Depends(get_session_repository),
    users: UserRepository = Depends(get_user_repository),
    trainer: User = Depends(require_trainer),
):
    return _one(update_session(repo, users, id, body), "Session updated successfully")


@router.delete("/{id}")
def remove_session(
    id: int,
    repo: SessionRepository = Depends(get_session_repository),
    admin: User = Depends(require_admin),
):
    delete_session(repo, id)
    return {"success": True, "message": "Session deleted successfully"}


@router.post("/{id}/add-user")
def add_user_to_session(
    id: int,
    body: SessionParticipant,
    repo: SessionRepository = Depends(get_session_repository),
    users: UserRepository = Depends(get_user_repository),
    user: User = Depends(get_current_user),
):
    return _one(add_participant(repo, users, id, body.user_id), "User added to session successfully")


@router.post("/{id}/remove-user")
def remove_user_from_session(
    id: int,
    body: SessionParticipant,
    repo: SessionRepository = Depends(get_session_repository),
    trainer: User = Depends(require_trainer),
):
    return _one(remove_participant(repo, id, body.user_id), "User removed from session successfully")


@router.patch("/{id}/status")
def change_session_status(
    id: int,
    body: SessionStatusUpdate,
    repo: SessionRepository = Depends(get_session_repository),
    trainer: User = Depends(require_trainer),
):
    return _one(update_status(repo, id, body.status), "Session status updated successfully")
