"""FastAPI application — main entry point."""

from contextlib import asynccontextmanager
from datetime import datetime, timezone

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fitdesk.config import get_settings
from fitdesk.infrastructure.database import Base, SessionLocal, engine
from fitdesk.core.logging import configure_logging
from fitdesk.core.middleware import setup_middleware
from fitdesk.core.exceptions import register_exception_handlers

# Import all models so SQLAlchemy knows about them
from fitdesk.domain.models.user import User
from fitdesk.domain.models.otp import OTP  # noqa: F401
from fitdesk.domain.models.session import TrainingSession  # noqa: F401
from fitdesk.domain.models.payment import Payment  # noqa: F401

# Import routers
from fitdesk.interfaces.api.users import router as users_router
from fitdesk.interfaces.api.otp import router as otp_router
from fitdesk.interfaces.api.profile import router as profile_router
from fitdesk.interfaces.api.sessions import router as sessions_router
from fitdesk.interfaces.api.payments import router as payments_router

settings = get_settings()

# Configure logging immediately
configure_logging()
logger = structlog.get_logger(__name__)

APP_VERSION = "1.0.0"


def ensure_admin(phone_number: str) -> None:
    """Make sure the bootstrap admin exists and carries the admin flag."""
    db = SessionLocal()
    try:
        admin = db.query(User).filter(User.phone_number == phone_number).first()
        if admin is None:
            db.add(User(phone_number=phone_number, name="Admin", is_admin=True))
            db.commit()
            logger.info("Bootstrap admin created", phone=phone_number)
        elif not admin.is_admin:
            admin.is_admin = True
            db.commit()
            logger.info("Bootstrap admin promoted", user_id=admin.id)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan — startup and shutdown events."""
    logger.info("Starting FitDesk backend...", env=settings.ENVIRONMENT)

    # Create DB tables (no migrations yet)
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    if settings.ADMIN_PHONE_NUMBER:
        ensure_admin(settings.ADMIN_PHONE_NUMBER)

    yield

    logger.info("FitDesk backend stopped")


app = FastAPI(
    title="FitDesk",
    description="Gym back-office API — OTP login, profiles, training sessions and payments",
    version=APP_VERSION,
    lifespan=lifespan,
)

# Setup Middleware (Correlation ID, Logging)
setup_middleware(app)

register_exception_handlers(app)

# CORS is added last so it wraps everything else
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(users_router)
app.include_router(otp_router)
app.include_router(profile_router)
app.include_router(sessions_router)
app.include_router(payments_router)


@app.get("/")
def root():
    return {
        "name": "FitDesk",
        "version": APP_VERSION,
        "status": "running",
        "docs": "/docs",
    }


@app.get("/api/health")
def health():
    return {
        "success": True,
        "status": "OK",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
