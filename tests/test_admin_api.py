import uuid

import jwt
import pytest
from pydantic import ValidationError as PydanticValidationError

from app.constants.constants import (
    CONTACT_NOT_FOUND_MESSAGE,
    INVALID_CONTACT_ID_MESSAGE,
    INVALID_STATUS_MESSAGE,
    STATUS_UPDATED_MESSAGE,
)
from app.core.config import Settings
from app.core.security import ADMIN_COOKIE_NAME, create_jwt_token
from app.services.SubmissionStore import SubmissionStore

CONTACTS_URL = "/api/v1/admin/contacts"


@pytest.fixture
async def submissions(database, clock):
    async with database.session_factory() as session:
        store = SubmissionStore(session)
        created = []
        for name in ["Ada", "Grace", "Linus"]:
            created.append(await store.create(name, f"{name.lower()}@example.com", f"Hi from {name}"))
        return created


class TestAuthentication:

    @pytest.mark.parametrize("method,url", [
        ("GET", CONTACTS_URL),
        ("GET", f"{CONTACTS_URL}/stats"),
        ("GET", f"{CONTACTS_URL}/{uuid.uuid4()}"),
        ("PATCH", f"{CONTACTS_URL}/{uuid.uuid4()}"),
    ])
    async def test_admin_routes_require_credentials(self, client, method, url):
        response = await client.request(method, url, json={"status": "read"})

        assert response.status_code == 401

    async def test_wrong_api_key(self, client):
        response = await client.get(CONTACTS_URL, headers={"X-API-Key": "guess"})

        assert response.status_code == 401

    async def test_session_cookie_grants_access(self, client, admin_api_key):
        login = await client.post("/api/v1/admin/session", json={"api_key": admin_api_key})
        assert login.status_code == 200
        token = login.cookies[ADMIN_COOKIE_NAME]

        response = await client.get(CONTACTS_URL, headers={"Cookie": f"{ADMIN_COOKIE_NAME}={token}"})

        assert response.status_code == 200

    async def test_session_rejects_wrong_key(self, client):
        response = await client.post("/api/v1/admin/session", json={"api_key": "guess"})

        assert response.status_code == 401
        assert ADMIN_COOKIE_NAME not in response.cookies

    async def test_token_without_admin_role_is_rejected(self, client):
        token = create_jwt_token({"sub": "someone", "role": "viewer"})

        response = await client.get(CONTACTS_URL, headers={"Cookie": f"{ADMIN_COOKIE_NAME}={token}"})

        assert response.status_code == 401

    async def test_token_signed_with_another_key_is_rejected(self, client, database):
        forged = jwt.encode({"sub": "intruder", "role": "admin"}, "dev-secret-key", algorithm="HS256")

        response = await client.get(CONTACTS_URL, headers={"Cookie": f"{ADMIN_COOKIE_NAME}={forged}"})

        assert response.status_code == 401


def test_secret_key_has_no_fallback(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)

    with pytest.raises(PydanticValidationError):
        Settings(_env_file=None)


class TestListContacts:

    async def test_sorted_most_recent_first(self, client, admin_headers, submissions):
        response = await client.get(CONTACTS_URL, headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert [c["name"] for c in body["contacts"]] == ["Linus", "Grace", "Ada"]

        newest = body["contacts"][0]
        assert newest["_id"] == submissions[-1].submission_id
        assert newest["status"] == "new"
        assert set(newest) == {"_id", "name", "email", "message", "status", "createdAt", "updatedAt"}
        assert newest["createdAt"] == "2024-01-01T12:00:03Z"
        assert newest["updatedAt"].endswith("Z")

    async def test_new_submission_appears_first(self, client, admin_headers, submissions):
        await client.post("/api/v1/contact", json={
            "name": "Margaret", "email": "margaret@example.com", "message": "Apollo"
        })

        response = await client.get(CONTACTS_URL, headers=admin_headers)

        assert response.json()["contacts"][0]["name"] == "Margaret"


class TestContactDetail:

    async def test_get_one(self, client, admin_headers, submissions):
        target = submissions[1]

        response = await client.get(f"{CONTACTS_URL}/{target.submission_id}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["contact"]["email"] == "grace@example.com"

    async def test_unknown(self, client, admin_headers, database):
        response = await client.get(f"{CONTACTS_URL}/{uuid.uuid4()}", headers=admin_headers)

        assert response.status_code == 404
        assert response.json() == {"error": CONTACT_NOT_FOUND_MESSAGE}


class TestUpdateStatus:

    async def test_mark_replied(self, client, admin_headers, submissions):
        target = submissions[0]
        url = f"{CONTACTS_URL}/{target.submission_id}"

        response = await client.patch(url, json={"status": "replied"}, headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": STATUS_UPDATED_MESSAGE}

        contact = (await client.get(url, headers=admin_headers)).json()["contact"]
        assert contact["status"] == "replied"
        assert contact["updatedAt"] > contact["createdAt"]

    async def test_same_status_twice(self, client, admin_headers, submissions):
        url = f"{CONTACTS_URL}/{submissions[0].submission_id}"

        first = await client.patch(url, json={"status": "read"}, headers=admin_headers)
        second = await client.patch(url, json={"status": "read"}, headers=admin_headers)

        assert first.status_code == 200
        assert second.status_code == 200

    async def test_malformed_id(self, client, admin_headers, database):
        response = await client.patch(f"{CONTACTS_URL}/not-an-id", json={"status": "read"}, headers=admin_headers)

        assert response.status_code == 400
        assert response.json() == {"error": INVALID_CONTACT_ID_MESSAGE}

    async def test_unknown_id(self, client, admin_headers, database):
        response = await client.patch(
            f"{CONTACTS_URL}/{uuid.uuid4()}", json={"status": "read"}, headers=admin_headers
        )

        assert response.status_code == 404
        assert response.json() == {"error": CONTACT_NOT_FOUND_MESSAGE}

    @pytest.mark.parametrize("status", ["archived", "", None])
    async def test_invalid_status(self, client, admin_headers, submissions, status):
        response = await client.patch(
            f"{CONTACTS_URL}/{submissions[0].submission_id}", json={"status": status}, headers=admin_headers
        )

        assert response.status_code == 400
        assert response.json() == {"error": INVALID_STATUS_MESSAGE}


class TestStats:

    async def test_counts_per_status(self, client, admin_headers, submissions):
        await client.patch(
            f"{CONTACTS_URL}/{submissions[0].submission_id}", json={"status": "replied"}, headers=admin_headers
        )

        response = await client.get(f"{CONTACTS_URL}/stats", headers=admin_headers)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "stats": {"total": 3, "new": 2, "read": 0, "replied": 1},
        }
