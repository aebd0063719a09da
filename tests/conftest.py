import os

# Settings are read once at import time; point them at an in-memory database first
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ADMIN_PHONE_NUMBER"] = ""

import pytest
from fastapi.testclient import TestClient

from fitdesk.application.services.auth_service import get_token_issuer
from fitdesk.application.services.notification_service import get_notification_service
from fitdesk.domain.models.user import User
from fitdesk.infrastructure.database import Base, SessionLocal, engine, get_db
from fitdesk.main import app


class FakeNotifier:
    """Stands in for NotificationService; keeps every code it was asked to send."""

    def __init__(self, delivered=True):
        self.delivered = delivered
        self.otps = []
        self.welcomes = []
        self.logins = []

    async def send_otp(self, identifier, code):
        self.otps.append((identifier, code))
        return {"success": self.delivered}

    async def send_welcome_message(self, phone, name):
        self.welcomes.append((phone, name))
        return {"success": self.delivered}

    async def send_login_notification(self, phone):
        self.logins.append(phone)
        return {"success": self.delivered}

    def last_code(self, identifier):
        return [code for ident, code in self.otps if ident == identifier][-1]


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def client(db, notifier):
    def _get_db():
        yield db

    app.dependency_overrides[get_db] = _get_db
    app.dependency_overrides[get_notification_service] = lambda: notifier
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db):
    counter = {"n": 0}

    def _make(**fields):
        counter["n"] += 1
        fields.setdefault("phone_number", f"98765{counter['n']:05d}")
        fields.setdefault("name", f"Member {counter['n']}")
        user = User(**fields)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def auth_header():
    issuer = get_token_issuer()

    def _header(user):
        return {"Authorization": f"Bearer {issuer.create_access_token(user)}"}

    return _header


@pytest.fixture
def admin(make_user):
    return make_user(name="Admin", is_admin=True)


@pytest.fixture
def trainer(make_user):
    return make_user(name="Trainer", is_trainer=True)


@pytest.fixture
def member(make_user):
    return make_user(name="Member")
