"""
OTP Repository Interface.
"""

from datetime import datetime
from typing import Optional

from fitdesk.domain.repositories.base import BaseRepository
from fitdesk.domain.models.otp import OTP


class OTPRepository(BaseRepository[OTP]):
    """Interface for one-time passcode storage."""

    def get_latest_unverified(self, identifier: str) -> Optional[OTP]:
        """Get the newest unverified OTP for an identifier."""
        ...

    def delete_unverified(self, identifier: str) -> int:
        """Delete every unverified OTP for an identifier; returns the count."""
        ...

    def create_otp(self, identifier: str, code: str, expires_at: datetime, created_at: datetime) -> OTP:
        """Persist a fresh OTP record."""
        ...
