"""User API routes — OTP login by email or phone, token refresh, lookup."""

from fastapi import APIRouter, Depends

from fitdesk.application.services.auth_service import TokenIssuer, get_token_issuer
from fitdesk.application.services.notification_service import NotificationService, get_notification_service
from fitdesk.application.services.otp_service import OTPService
from fitdesk.application.services.user_service import (
    get_user,
    list_users,
    login_with_otp,
    refresh_access_token,
    request_otp,
)
from fitdesk.config import get_settings
from fitdesk.domain.models.user import User
from fitdesk.domain.repositories.user_repository import UserRepository
from fitdesk.domain.schemas.auth import OTPLoginRequest, OTPLoginVerify, RefreshTokenRequest, TokenPair, UserRead
from fitdesk.interfaces.api.deps import require_admin, require_owner_or_admin
from fitdesk.interfaces.deps import get_otp_service, get_user_repository

router = APIRouter(prefix="/api/users", tags=["Users"])


@router.post("/request-otp")
async def request_login_otp(
    body: OTPLoginRequest,
    otp_service: OTPService = Depends(get_otp_service),
    notifier: NotificationService = Depends(get_notification_service),
):
    delivered = await request_otp(otp_service, notifier, body.identifier)
    channel = "email" if body.identifier_type == "email" else "WhatsApp"
    return {
        "success": True,
        "message": f"OTP sent to your {channel}",
        "identifier_type": body.identifier_type,
        "expires_in": f"{get_settings().OTP_EXPIRY_MINUTES} minutes",
        "delivered": delivered,
    }


@router.post("/verify-otp")
def verify_login_otp(
    body: OTPLoginVerify,
    otp_service: OTPService = Depends(get_otp_service),
    repo: UserRepository = Depends(get_user_repository),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    user, _ = login_with_otp(
        otp_service, repo, body.identifier, body.otp, is_email=body.identifier_type == "email"
    )
    return {
        "success": True,
        "message": "Login successful",
        "user": UserRead.model_validate(user),
        "tokens": TokenPair(**issuer.issue_tokens(user)),
    }


@router.post("/refresh-token")
def refresh_token(
    body: RefreshTokenRequest,
    repo: UserRepository = Depends(get_user_repository),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    access_token = refresh_access_token(issuer, repo, body.refresh_token)
    return {
        "success": True,
        "access_token": access_token,
        "token_type": "bearer",
    }


@router.get("")
def all_users(
    skip: int = 0,
    limit: int = 100,
    repo: UserRepository = Depends(get_user_repository),
    admin: User = Depends(require_admin),
):
    users = list_users(repo, skip=skip, limit=limit)
    return {"success": True, "data": [UserRead.model_validate(u) for u in users]}


@router.get("/{user_id}")
def user_by_id(
    user_id: int,
    repo: UserRepository = Depends(get_user_repository),
    user: User = Depends(require_owner_or_admin),
):
    return {"success": True, "data": UserRead.model_validate(get_user(repo, user_id))}
