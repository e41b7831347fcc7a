"""Pytest configuration and fixtures."""

import os

# Point the module-level engine at SQLite before the app is imported
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["MAIL_BACKEND"] = "console"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from notetaking.main import app
from notetaking.config import Settings, get_settings
from notetaking.db.base import Base
from notetaking.db.session import get_db
from notetaking.api.dependencies import get_identity_verifier, get_mail_sender
from notetaking.integrations.identity import (
    IdentityVerifier,
    IdentityVerificationError,
    IdentityProviderUnavailable,
    VerifiedIdentity,
)
from notetaking.integrations.mail import MailSender, MailDeliveryError
from notetaking.services.auth_service import AuthService
from notetaking.services.notes_service import NotesService


# In-memory SQLite for testing
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class MockMailSender(MailSender):
    """Mail sender that records messages instead of sending them."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send_otp(self, to_email: str, otp: str, name: str, expires_in_minutes: int) -> None:
        if self.fail:
            raise MailDeliveryError("mail server unavailable")
        self.sent.append({"to": to_email, "otp": otp, "name": name})

    def last_otp(self, email: str) -> str:
        return [m["otp"] for m in self.sent if m["to"] == email][-1]


class MockIdentityVerifier(IdentityVerifier):
    """Identity verifier backed by a dict of known credentials."""

    def __init__(self):
        self.identities = {}
        self.unavailable = False
        self.calls = 0

    def add(self, credential: str, **claims) -> None:
        claims.setdefault("email_verified", True)
        self.identities[credential] = VerifiedIdentity(**claims)

    def verify(self, credential: str) -> VerifiedIdentity:
        self.calls += 1
        if self.unavailable:
            raise IdentityProviderUnavailable("provider down")
        if credential not in self.identities:
            raise IdentityVerificationError("Token used too late")
        return self.identities[credential]


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def test_settings():
    return Settings(
        DATABASE_URL=SQLALCHEMY_DATABASE_URL,
        SECRET_KEY="test-secret-key",
        GOOGLE_CLIENT_ID="test-client-id.apps.googleusercontent.com",
        ENVIRONMENT="test",
        MAIL_BACKEND="console",
    )


@pytest.fixture
def mail_sender():
    return MockMailSender()


@pytest.fixture
def identity_verifier():
    return MockIdentityVerifier()


@pytest.fixture
def auth_service(db_session, test_settings, mail_sender, identity_verifier):
    return AuthService(db_session, test_settings, mail_sender, identity_verifier)


@pytest.fixture
def notes_service(db_session):
    return NotesService(db_session)


@pytest.fixture(scope="function")
def client(db_session, test_settings, mail_sender, identity_verifier):
    """Create a test client with overridden dependencies."""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_mail_sender] = lambda: mail_sender
    app.dependency_overrides[get_identity_verifier] = lambda: identity_verifier

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def signup(client, mail_sender):
    """Return a helper that registers and verifies an account through the API."""

    def _signup(email="test@example.com", name="Test User", password="testpassword123"):
        response = client.post("/api/auth/send-otp", json={"email": email, "name": name})
        assert response.status_code == 200

        response = client.post(
            "/api/auth/verify-otp",
            json={"email": email, "otp": mail_sender.last_otp(email), "password": password},
        )
        assert response.status_code == 200
        return response.json()

    return _signup


@pytest.fixture
def test_user(signup):
    """Create a verified test user and return credentials."""
    user_data = {
        "email": "test@example.com",
        "password": "testpassword123",
        "name": "Test User",
    }
    body = signup(**user_data)
    return {"user_data": user_data, "token": body["token"], "user": body["user"]}


@pytest.fixture
def auth_headers(test_user):
    """Return authorization headers for authenticated requests."""
    return {"Authorization": f"Bearer {test_user['token']}"}
