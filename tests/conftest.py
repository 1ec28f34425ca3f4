"""
Shared pytest fixtures for the contact backend tests.
"""
import asyncio
import os
from datetime import datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient

os.environ.setdefault("SECRET_KEY", "test-secret-key")

from app.api.v1.dependencies import get_email_client
from app.core.config import settings
from app.core.database import session_manager
from app.core.exceptions import NotificationError
from app.core.limiter import limiter
from app.core.security import hash_key
from app.main import app

ADMIN_API_KEY = "test-admin-key"


class FakeEmailClient:
    """Records every message instead of calling Microsoft Graph."""

    def __init__(self):
        self.sent = []
        self.fail_for = set()

    async def send_email(self, to_emails, subject, body_html, reply_to=None):
        await asyncio.sleep(0)
        for address in to_emails:
            if address in self.fail_for:
                raise NotificationError()
        self.sent.append({
            "to": list(to_emails),
            "subject": subject,
            "body_html": body_html,
            "reply_to": reply_to,
        })
        return {"status": "sent", "to": to_emails, "subject": subject}


class SteppingClock:
    """Returns strictly increasing timestamps, one second apart."""

    def __init__(self, start=datetime(2024, 1, 1, 12, 0, 0)):
        self.current = start

    def __call__(self):
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture(autouse=True)
def admin_api_key(monkeypatch):
    monkeypatch.setattr(settings, "HASHED_API_KEY", hash_key(ADMIN_API_KEY))
    return ADMIN_API_KEY


@pytest.fixture(autouse=True)
def no_rate_limit():
    """Rate limiting is off unless a test turns it back on."""
    limiter.reset()
    limiter.enabled = False
    yield limiter
    limiter.enabled = True
    limiter.reset()


@pytest.fixture
def clock(monkeypatch):
    fake = SteppingClock()
    monkeypatch.setattr("app.services.SubmissionStore.utcnow", fake)
    return fake


@pytest.fixture
async def database(tmp_path):
    await session_manager.init(f"sqlite+aiosqlite:///{tmp_path / 'contacts.db'}")
    yield session_manager
    await session_manager.close()


@pytest.fixture
async def db_session(database):
    async with database.session_factory() as session:
        yield session


@pytest.fixture
def email_client():
    return FakeEmailClient()


@pytest.fixture
async def client(database, email_client):
    app.dependency_overrides[get_email_client] = lambda: email_client
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    return {"X-API-Key": ADMIN_API_KEY}
