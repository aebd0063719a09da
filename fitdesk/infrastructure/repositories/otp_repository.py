"""
SQLAlchemy Implementation of OTP Repository.
"""

from datetime import datetime
from typing import Optional

from fitdesk.domain.models.otp import OTP
from fitdesk.domain.repositories.otp_repository import OTPRepository
from fitdesk.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyOTPRepository(SQLAlchemyRepository[OTP], OTPRepository):
    """OTP repository implementation using SQLAlchemy."""

    def get_latest_unverified(self, identifier: str) -> Optional[OTP]:
        return (
            self.db.query(OTP)
            .filter(OTP.identifier == identifier, OTP.is_verified.is_(False))
            .order_by(OTP.created_at.desc(), OTP.id.desc())
            .first()
        )

    def delete_unverified(self, identifier: str) -> int:
        deleted = (
            self.db.query(OTP)
            .filter(OTP.identifier == identifier, OTP.is_verified.is_(False))
            .delete(synchronize_session="fetch")
        )
        self.db.commit()
        return deleted

    def create_otp(self, identifier: str, code: str, expires_at: datetime, created_at: datetime) -> OTP:
        return self.save(OTP(identifier=identifier, otp=code, expires_at=expires_at, created_at=created_at))
