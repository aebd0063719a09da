"""Profile service — partial updates of personal details, measurements and BCA."""

from typing import Any, Dict, Optional

import structlog

from fitdesk.application.services.user_service import get_user
from fitdesk.domain.models.user import User
from fitdesk.domain.repositories.user_repository import UserRepository
from fitdesk.domain.schemas.profile import (
    BCAUpdate,
    FullProfileUpdate,
    MeasurementsUpdate,
    PersonalDetailsUpdate,
)

logger = structlog.get_logger(__name__)


def _personal_columns(body: Optional[PersonalDetailsUpdate]) -> Dict[str, Any]:
    return body.model_dump(exclude_unset=True) if body else {}


def _measurement_columns(body: Optional[MeasurementsUpdate]) -> Dict[str, Any]:
    if not body:
        return {}
    return {f"measurements_{field}": value for field, value in body.model_dump(exclude_unset=True).items()}


def _bca_columns(body: Optional[BCAUpdate]) -> Dict[str, Any]:
    if not body:
        return {}
    return {f"bca_{field}": value for field, value in body.model_dump(exclude_unset=True).items()}


def _apply(repo: UserRepository, user_id: int, changes: Dict[str, Any], section: str) -> User:
    user = get_user(repo, user_id)
    user = repo.update(user, changes)
    logger.info("Profile updated", user_id=user_id, section=section, fields=sorted(changes))
    return user


def update_personal_details(repo: UserRepository, user_id: int, body: PersonalDetailsUpdate) -> User:
    return _apply(repo, user_id, _personal_columns(body), "personal")


def update_measurements(repo: UserRepository, user_id: int, body: MeasurementsUpdate) -> User:
    return _apply(repo, user_id, _measurement_columns(body), "measurements")


def update_bca(repo: UserRepository, user_id: int, body: BCAUpdate) -> User:
    return _apply(repo, user_id, _bca_columns(body), "bca")


def update_full_profile(repo: UserRepository, user_id: int, body: FullProfileUpdate) -> User:
    changes = {
        **_personal_columns(body.personal_details),
        **_measurement_columns(body.measurements),
        **_bca_columns(body.bca),
    }
    return _apply(repo, user_id, changes, "full")
