"""
Tests for the user service HTTP API against a temporary SQLite database.
"""

import pytest
from fastapi.testclient import TestClient

from core.auth import Role
from web.users.app import create_app

pytestmark = pytest.mark.db


@pytest.fixture
def client(app_config, database):
    return TestClient(create_app(config=app_config, database=database))


def register(client, username="ada", email="ada@example.com", password="secret123", **extra):
    return client.post(
        "/users/register",
        json={"username": username, "email": email, "password": password, **extra},
    )


def bearer(token):
    return {"Authorization": f"Bearer {token}"}


class TestRegister:

    def test_creates_candidate_by_default(self, client):
        response = register(client, email="Ada@Example.COM")

        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "ada"
        assert data["email"] == "ada@example.com"
        assert data["role"] == "candidate"
        assert data["id"]
        assert "password" not in data
        assert "password_hash" not in data

    def test_duplicate_email_is_400(self, client):
        register(client)

        response = register(client, username="someone-else")

        assert response.status_code == 400
        assert response.json()["error"] == "User with this email or username already exists"

    def test_duplicate_username_is_400(self, client):
        register(client)

        assert register(client, email="other@example.com").status_code == 400

    @pytest.mark.parametrize("overrides", [
        {"email": "not-an-email"},
        {"password": "123"},
        {"username": "ab"},
        {"role": "superuser"},
    ])
    def test_invalid_payload_is_400(self, client, overrides):
        response = register(client, **overrides)

        assert response.status_code == 400
        assert response.json()["error"] == "Validation failed"


class TestLogin:

    def test_token_carries_identity(self, client, verifier):
        user = register(client, role="recruiter").json()

        response = client.post("/users/login", json={"email": "ada@example.com", "password": "secret123"})

        assert response.status_code == 200
        data = response.json()
        assert data["user"]["id"] == user["id"]
        claims = verifier.verify(data["token"])
        assert claims.subject_id == user["id"]
        assert claims.role == Role.RECRUITER
        assert claims.username == "ada"
        assert claims.email == "ada@example.com"

    def test_email_is_case_insensitive(self, client):
        register(client)

        response = client.post("/users/login", json={"email": "ADA@example.com", "password": "secret123"})

        assert response.status_code == 200

    @pytest.mark.parametrize("email,password", [
        ("ada@example.com", "wrong-password"),
        ("nobody@example.com", "secret123"),
    ])
    def test_bad_credentials_look_the_same(self, client, email, password):
        register(client)

        response = client.post("/users/login", json={"email": email, "password": password})

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid credentials"}


class TestUserAccess:

    def test_listing_requires_token(self, client):
        assert client.get("/users").status_code == 401

    def test_listing_requires_admin(self, client, make_token):
        response = client.get("/users", headers=bearer(make_token(Role.RECRUITER)))

        assert response.status_code == 403

    def test_admin_lists_users(self, client, make_token):
        register(client)
        register(client, username="grace", email="grace@example.com")

        response = client.get("/users", params={"limit": 1}, headers=bearer(make_token(Role.ADMIN, "admin-1")))

        assert response.status_code == 200
        data = response.json()
        assert len(data["users"]) == 1
        assert data["pagination"] == {"current_page": 1, "per_page": 1, "total_pages": 2, "total_users": 2}

    def test_get_user(self, client, make_token):
        user = register(client).json()

        response = client.get(f"/users/{user['id']}", headers=bearer(make_token()))

        assert response.status_code == 200
        assert response.json()["email"] == "ada@example.com"
        assert response.json()["created_at"] is not None

    def test_get_user_requires_token(self, client):
        user = register(client).json()

        assert client.get(f"/users/{user['id']}").status_code == 401

    def test_unknown_user_is_404(self, client, make_token):
        response = client.get("/users/does-not-exist", headers=bearer(make_token()))

        assert response.status_code == 404
        assert response.json()["error"] == "User not found"


class TestUpdateUser:

    def test_user_updates_self(self, client, make_token):
        user = register(client).json()

        response = client.put(
            f"/users/{user['id']}",
            json={"username": "ada-l"},
            headers=bearer(make_token(Role.CANDIDATE, user["id"])),
        )

        assert response.status_code == 200
        assert response.json()["username"] == "ada-l"

    def test_cannot_update_someone_else(self, client, make_token):
        user = register(client).json()

        response = client.put(
            f"/users/{user['id']}",
            json={"username": "hijacked"},
            headers=bearer(make_token(Role.CANDIDATE, "someone-else")),
        )

        assert response.status_code == 403

    def test_only_admin_changes_role(self, client, make_token):
        user = register(client).json()

        own = client.put(
            f"/users/{user['id']}",
            json={"role": "admin"},
            headers=bearer(make_token(Role.CANDIDATE, user["id"])),
        )
        by_admin = client.put(
            f"/users/{user['id']}",
            json={"role": "recruiter"},
            headers=bearer(make_token(Role.ADMIN, "admin-1")),
        )

        assert own.status_code == 403
        assert by_admin.status_code == 200
        assert by_admin.json()["role"] == "recruiter"

    def test_update_to_taken_email_is_400(self, client, make_token):
        register(client, username="grace", email="grace@example.com")
        user = register(client).json()

        response = client.put(
            f"/users/{user['id']}",
            json={"email": "grace@example.com"},
            headers=bearer(make_token(Role.CANDIDATE, user["id"])),
        )

        assert response.status_code == 400


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy", "service": "user-service"}
