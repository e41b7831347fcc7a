"""Tests for the Python API client, driven through the ASGI test client."""

from datetime import timedelta
from uuid import UUID

import pytest

from notetaking.client import (
    ApiError,
    NoteTakingClient,
    ResendCooldownActive,
    SessionExpired,
    TokenStore,
)


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def api(client, tmp_path, clock):
    store = TokenStore(tmp_path / "session.json")
    return NoteTakingClient(
        base_url="http://testserver/api",
        store=store,
        session=client,
        clock=clock,
    )


def _signed_up(api, mail_sender, email="cli@example.com"):
    api.send_otp(email, "Cli User")
    return api.verify_otp(email, mail_sender.last_otp(email), "secret123")


class TestClientAuth:

    def test_signup_persists_session(self, api, mail_sender, tmp_path):
        data = _signed_up(api, mail_sender)

        assert api.is_authenticated
        assert (tmp_path / "session.json").exists()

        reloaded = TokenStore(tmp_path / "session.json")
        assert reloaded.token == data["token"]
        assert reloaded.user["email"] == "cli@example.com"

    def test_current_user(self, api, mail_sender):
        _signed_up(api, mail_sender)
        assert api.current_user()["name"] == "Cli User"

    def test_login_failure_raises_api_error(self, api):
        with pytest.raises(ApiError) as exc_info:
            api.login("nobody@example.com", "secret123")
        assert exc_info.value.status_code == 400
        assert exc_info.value.message == "Invalid credentials"
        assert not api.is_authenticated

    def test_google_login(self, api, identity_verifier):
        identity_verifier.add("cred", subject="sub-9", email="g@example.com", name="G")
        data = api.google_login("cred")
        assert data["user"]["isEmailVerified"] is True
        assert api.store.user["email"] == "g@example.com"

    def test_logout_clears_store(self, api, mail_sender, tmp_path):
        _signed_up(api, mail_sender)
        api.logout()
        assert not api.is_authenticated
        assert not (tmp_path / "session.json").exists()

    def test_unauthorized_clears_session(self, api, mail_sender, auth_service):
        data = _signed_up(api, mail_sender)
        expired = auth_service.create_access_token(
            UUID(data["user"]["id"]), expires_delta=timedelta(seconds=-1)
        )
        api.store.save(expired, data["user"])

        with pytest.raises(SessionExpired):
            api.list_notes()
        assert api.store.token is None
        assert api.store.user is None


class TestResendCooldown:

    def test_resend_blocked_within_cooldown(self, api, clock, mail_sender):
        api.send_otp("cli@example.com", "Cli User")
        clock.now += 30

        with pytest.raises(ResendCooldownActive) as exc_info:
            api.resend_otp("cli@example.com", "Cli User")
        assert exc_info.value.remaining == pytest.approx(30)
        assert len(mail_sender.sent) == 1

    def test_resend_allowed_after_cooldown(self, api, clock, mail_sender):
        api.send_otp("cli@example.com", "Cli User")
        clock.now += 61

        api.resend_otp("cli@example.com", "Cli User")
        assert len(mail_sender.sent) == 2


class TestClientNotes:

    def test_notes_crud(self, api, mail_sender):
        _signed_up(api, mail_sender)

        created = api.create_note("Title", "Body")
        assert api.list_notes() == [created]
        assert api.get_note(created["id"]) == created

        updated = api.update_note(created["id"], "New title", "New body")
        assert updated["title"] == "New title"

        api.delete_note(created["id"])
        assert api.list_notes() == []

    def test_missing_note(self, api, mail_sender):
        _signed_up(api, mail_sender)
        with pytest.raises(ApiError) as exc_info:
            api.delete_note("00000000-0000-0000-0000-000000000000")
        assert exc_info.value.status_code == 404
