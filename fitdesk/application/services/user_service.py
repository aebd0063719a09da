"""User service — OTP login flows, user lookup and token refresh."""

import time
from typing import List, Optional, Tuple

import structlog

from fitdesk.application.services.auth_service import REFRESH_TOKEN, TokenIssuer
from fitdesk.application.services.notification_service import NotificationService
from fitdesk.application.services.otp_service import OTPService
from fitdesk.core.exceptions import InvalidTokenError, NotFoundError
from fitdesk.domain.models.user import User
from fitdesk.domain.repositories.user_repository import UserRepository

logger = structlog.get_logger(__name__)


def get_user(repo: UserRepository, user_id: int) -> User:
    user = repo.get_by_id(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def list_users(repo: UserRepository, skip: int = 0, limit: int = 100) -> List[User]:
    return repo.list(skip=skip, limit=limit)


async def request_otp(otp_service: OTPService, notifier: NotificationService, identifier: str) -> bool:
    """Issue an OTP and hand it to the notifier. Returns whether delivery succeeded."""
    record = otp_service.issue(identifier)
    result = await notifier.send_otp(identifier, record.otp)
    return result["success"]


def get_or_create_by_email(repo: UserRepository, email: str) -> Tuple[User, bool]:
    user = repo.get_by_email(email)
    if user:
        return user, False
    user = repo.create({"email": email, "name": email.split("@")[0]})
    logger.info("User registered", user_id=user.id, channel="email")
    return user, True


def get_or_create_by_phone(repo: UserRepository, phone_number: str, name: Optional[str] = None) -> Tuple[User, bool]:
    user = repo.get_by_phone(phone_number)
    if user:
        return user, False
    user = repo.create({"phone_number": phone_number, "name": name or f"User_{phone_number[-4:]}"})
    logger.info("User registered", user_id=user.id, channel="phone")
    return user, True


def login_with_otp(
    otp_service: OTPService,
    repo: UserRepository,
    identifier: str,
    code: str,
    is_email: bool,
) -> Tuple[User, bool]:
    """Verify the OTP, then fetch or create the matching user."""
    otp_service.verify(identifier, code)
    if is_email:
        return get_or_create_by_email(repo, identifier)
    return get_or_create_by_phone(repo, identifier)


async def login_with_whatsapp_otp(
    otp_service: OTPService,
    repo: UserRepository,
    notifier: NotificationService,
    phone_number: str,
    code: str,
) -> Tuple[User, bool]:
    """Phone-only login: new users get a welcome message, returning ones a login alert."""
    otp_service.verify(phone_number, code)

    generated_name = f"User_{phone_number[-4:]}_{str(int(time.time() * 1000))[-4:]}"
    user, created = get_or_create_by_phone(repo, phone_number, name=generated_name)

    if created:
        await notifier.send_welcome_message(phone_number, user.name)
    else:
        await notifier.send_login_notification(phone_number)
    return user, created


def refresh_access_token(issuer: TokenIssuer, repo: UserRepository, refresh_token: str) -> str:
    payload = issuer.decode(refresh_token, expected_type=REFRESH_TOKEN)
    user = repo.get_by_id(payload["id"])
    if user is None:
        raise InvalidTokenError()
    return issuer.create_access_token(user)
