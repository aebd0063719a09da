"""WhatsApp OTP routes — send, resend and verify-and-login by phone number."""

from fastapi import APIRouter, Depends

from fitdesk.application.services.auth_service import TokenIssuer, get_token_issuer
from fitdesk.application.services.notification_service import NotificationService, get_notification_service
from fitdesk.application.services.otp_service import OTPService
from fitdesk.application.services.user_service import login_with_whatsapp_otp, request_otp
from fitdesk.config import get_settings
from fitdesk.domain.repositories.user_repository import UserRepository
from fitdesk.domain.schemas.auth import PhoneOTPRequest, PhoneOTPVerify, TokenPair, UserRead
from fitdesk.interfaces.deps import get_otp_service, get_user_repository

router = APIRouter(prefix="/api/otp", tags=["OTP"])


def _sent(message: str, delivered: bool) -> dict:
    return {
        "success": True,
        "message": message,
        "expires_in": f"{get_settings().OTP_EXPIRY_MINUTES} minutes",
        "delivered": delivered,
    }


@router.post("/send")
async def send_otp(
    body: PhoneOTPRequest,
    otp_service: OTPService = Depends(get_otp_service),
    notifier: NotificationService = Depends(get_notification_service),
):
    delivered = await request_otp(otp_service, notifier, body.phone_number)
    return _sent("OTP sent successfully via WhatsApp", delivered)


@router.post("/resend")
async def resend_otp(
    body: PhoneOTPRequest,
    otp_service: OTPService = Depends(get_otp_service),
    notifier: NotificationService = Depends(get_notification_service),
):
    # Same path as /send; the cooldown is enforced when the code is issued
    delivered = await request_otp(otp_service, notifier, body.phone_number)
    return _sent("OTP resent successfully via WhatsApp", delivered)


@router.post("/verify")
async def verify_otp(
    body: PhoneOTPVerify,
    otp_service: OTPService = Depends(get_otp_service),
    repo: UserRepository = Depends(get_user_repository),
    notifier: NotificationService = Depends(get_notification_service),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    user, created = await login_with_whatsapp_otp(otp_service, repo, notifier, body.phone_number, body.otp)
    return {
        "success": True,
        "message": "Login successful",
        "is_new_user": created,
        "user": UserRead.model_validate(user),
        "tokens": TokenPair(**issuer.issue_tokens(user)),
    }
