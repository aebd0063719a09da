"""
API Dependencies.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from fitdesk.application.services.otp_service import OTPService
from fitdesk.config import get_settings
from fitdesk.domain.models.otp import OTP
from fitdesk.domain.models.payment import Payment
from fitdesk.domain.models.session import TrainingSession
from fitdesk.domain.models.user import User
from fitdesk.domain.repositories.otp_repository import OTPRepository
from fitdesk.domain.repositories.payment_repository import PaymentRepository
from fitdesk.domain.repositories.session_repository import SessionRepository
from fitdesk.domain.repositories.user_repository import UserRepository
from fitdesk.infrastructure.database import get_db
from fitdesk.infrastructure.repositories.otp_repository import SQLAlchemyOTPRepository
from fitdesk.infrastructure.repositories.payment_repository import SQLAlchemyPaymentRepository
from fitdesk.infrastructure.repositories.session_repository import SQLAlchemySessionRepository
from fitdesk.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def get_user_repository(db: Session = Depends(get_db)) -> UserRepository:
    """Get user repository instance."""
    return SQLAlchemyUserRepository(db, User)


def get_otp_repository(db: Session = Depends(get_db)) -> OTPRepository:
    return SQLAlchemyOTPRepository(db, OTP)


def get_session_repository(db: Session = Depends(get_db)) -> SessionRepository:
    """Get training session repository instance."""
    return SQLAlchemySessionRepository(db, TrainingSession)


def get_payment_repository(db: Session = Depends(get_db)) -> PaymentRepository:
    """Get payment repository instance."""
    return SQLAlchemyPaymentRepository(db, Payment)


def get_otp_service(repo: OTPRepository = Depends(get_otp_repository)) -> OTPService:
    return OTPService(repo, get_settings())
