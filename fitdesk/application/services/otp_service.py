"""OTP service — issuance, resend cooldown and single-use verification."""

import hmac
import math
import secrets
from datetime import datetime, timedelta
from typing import Optional

import structlog

from fitdesk.config import Settings
from fitdesk.core.exceptions import (
    InvalidOTPError,
    OTPAttemptsExceededError,
    OTPCooldownError,
    OTPExpiredError,
)
from fitdesk.domain.models.otp import OTP, as_utc, utcnow
from fitdesk.domain.repositories.otp_repository import OTPRepository

logger = structlog.get_logger(__name__)


def generate_otp(length: int = 4) -> str:
    """Numeric code without a leading zero, e.g. 1000-9999 for length 4."""
    low = 10 ** (length - 1)
    return str(low + secrets.randbelow(9 * low))


class OTPService:
    def __init__(self, repo: OTPRepository, settings: Settings):
        self.repo = repo
        self.length = settings.OTP_LENGTH
        self.expiry = timedelta(minutes=settings.OTP_EXPIRY_MINUTES)
        self.max_attempts = settings.OTP_MAX_ATTEMPTS
        self.cooldown_minutes = settings.OTP_RESEND_COOLDOWN_MINUTES

    def _check_cooldown(self, identifier: str, now: datetime) -> None:
        existing = self.repo.get_latest_unverified(identifier)
        if existing is None:
            return
        minutes_passed = math.floor((now - as_utc(existing.created_at)).total_seconds() / 60)
        if minutes_passed < self.cooldown_minutes:
            raise OTPCooldownError(self.cooldown_minutes - minutes_passed)

    def issue(self, identifier: str, now: Optional[datetime] = None) -> OTP:
        """Create a fresh OTP for ``identifier``, replacing any unverified one.

        Raises ``OTPCooldownError`` when the previous unverified code is younger
        than the resend cooldown.
        """
        now = now or utcnow()
        self._check_cooldown(identifier, now)

        replaced = self.repo.delete_unverified(identifier)
        record = self.repo.create_otp(identifier, generate_otp(self.length), now + self.expiry, now)
        logger.info("OTP issued", identifier=identifier, replaced=replaced)
        return record

    def verify(self, identifier: str, code: str, now: Optional[datetime] = None) -> OTP:
        """Consume the pending OTP for ``identifier`` if ``code`` matches."""
        now = now or utcnow()
        record = self.repo.get_latest_unverified(identifier)
        if record is None:
            raise InvalidOTPError()

        if record.attempts >= self.max_attempts:
            raise OTPAttemptsExceededError()

        if not hmac.compare_digest(record.otp.encode(), code.strip().encode()):
            record.attempts += 1
            self.repo.save(record)
            logger.info("OTP mismatch", identifier=identifier, attempts=record.attempts)
            raise InvalidOTPError()

        if record.is_expired(now):
            raise OTPExpiredError()

        record.is_verified = True
        self.repo.save(record)
        logger.info("OTP verified", identifier=identifier)
        return record
