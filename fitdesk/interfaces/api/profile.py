"""Profile API routes — personal details, body measurements and BCA."""

from fastapi import APIRouter, Depends

from fitdesk.application.services.profile_service import (
    update_bca,
    update_full_profile,
    update_measurements,
    update_personal_details,
)
from fitdesk.application.services.user_service import get_user
from fitdesk.domain.models.user import User
from fitdesk.domain.repositories.user_repository import UserRepository
from fitdesk.domain.schemas.auth import UserRead
from fitdesk.domain.schemas.profile import (
    BCAUpdate,
    FullProfileUpdate,
    MeasurementsUpdate,
    PersonalDetailsUpdate,
)
from fitdesk.interfaces.api.deps import require_owner_or_admin
from fitdesk.interfaces.deps import get_user_repository

router = APIRouter(prefix="/api/profile", tags=["Profile"])


def _updated(message: str, user: User) -> dict:
    return {"success": True, "message": message, "data": UserRead.model_validate(user)}


@router.get("/{user_id}")
def get_profile(
    user_id: int,
    repo: UserRepository = Depends(get_user_repository),
    current: User = Depends(require_owner_or_admin),
):
    return {"success": True, "data": UserRead.model_validate(get_user(repo, user_id))}


@router.put("/{user_id}")
def put_full_profile(
    user_id: int,
    body: FullProfileUpdate,
    repo: UserRepository = Depends(get_user_repository),
    current: User = Depends(require_owner_or_admin),
):
    return _updated("Profile updated successfully", update_full_profile(repo, user_id, body))


@router.put("/{user_id}/personal")
def put_personal_details(
    user_id: int,
    body: PersonalDetailsUpdate,
    repo: UserRepository = Depends(get_user_repository),
    current: User = Depends(require_owner_or_admin),
):
    return _updated("Personal details updated successfully", update_personal_details(repo, user_id, body))


@router.put("/{user_id}/measurements")
def put_measurements(
    user_id: int,
    body: MeasurementsUpdate,
    repo: UserRepository = Depends(get_user_repository),
    current: User = Depends(require_owner_or_admin),
):
    return _updated("Body measurements updated successfully", update_measurements(repo, user_id, body))


@router.put("/{user_id}/bca")
def put_bca(
    user_id: int,
    body: BCAUpdate,
    repo: UserRepository = Depends(get_user_repository),
    current: User = Depends(require_owner_or_admin),
):
    return _updated("Body composition analysis updated successfully", update_bca(repo, user_id, body))
