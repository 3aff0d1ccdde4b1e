"""
Tests for the user directory HTTP API.
"""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from conftest import JWT_SECRET, auth_header, make_token
from user_directory.api.app import create_app
from user_directory.config import Settings
from user_directory.repositories import ALL_USERS_KEY, user_key
from user_directory.services import UserService

ACCOUNT_FIELDS = {"id", "username", "email", "birthday", "privilege", "privilege_id", "createdAt", "updatedAt"}


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["name"] == "User Directory API"


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "store_healthy": True, "cache_healthy": True}


def test_health_reports_unavailable_cache(test_settings, store, hasher):
    cache = MagicMock()
    cache.health_check.return_value = False
    app = create_app(config=test_settings, user_service=UserService(store, cache, hasher))

    with TestClient(app) as client:
        response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["cache_healthy"] is False


# GET /users


def test_list_users_without_token(client, cache):
    response = client.get("/users")
    assert response.status_code == 401
    assert response.json() == {"error": "No authenticated user"}
    assert cache.reads == []


def test_list_users_with_invalid_token(client):
    token = make_token(1, 1, secret="wrong-secret-key-for-the-user-directory")
    response = client.get("/users", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


def test_list_users_as_non_admin(client):
    response = client.get("/users", headers=auth_header(5, 2))
    assert response.status_code == 403
    assert response.json() == {"error": "Only admins can view users"}


def test_list_users_as_admin(client, admin_headers, cache):
    response = client.get("/users", headers=admin_headers)

    assert response.status_code == 200
    users = response.json()
    assert len(users) == 9
    assert all(set(user) == ACCOUNT_FIELDS for user in users)
    assert users[0]["username"] == "root"
    assert users[0]["privilege"] == "admin"
    assert users[2]["privilege"] == "user"
    assert users[2]["birthday"] == "1990-01-03"
    assert ALL_USERS_KEY in cache.entries


def test_list_users_served_from_cache(client, admin_headers, cache):
    first = client.get("/users", headers=admin_headers).json()
    cache.entries[ALL_USERS_KEY] = cache.entries[ALL_USERS_KEY][:1]

    second = client.get("/users", headers=admin_headers).json()

    assert second == first[:1]


def test_list_users_without_privilege(client, admin_headers, store, hasher):
    store.create_account("nopriv", "nopriv@example.com", hasher.hash("pw"))

    users = client.get("/users", headers=admin_headers).json()

    assert users[-1]["username"] == "nopriv"
    assert users[-1]["privilege"] == "no privilege"
    assert users[-1]["privilege_id"] is None


def _failing_service(hasher) -> UserService:
    store = MagicMock()
    store.get_privilege.side_effect = RuntimeError("database is down")
    return UserService(store, MagicMock(), hasher)


def test_list_users_internal_error_in_development(hasher):
    app = create_app(config=Settings(environment="development", jwt_secret=JWT_SECRET), user_service=_failing_service(hasher))

    with TestClient(app) as client:
        response = client.get("/users", headers=auth_header(1, 1))

    assert response.status_code == 500
    assert response.json() == {"error": "Error fetching users", "details": "database is down"}


def test_list_users_internal_error_in_production(hasher):
    app = create_app(config=Settings(environment="production", jwt_secret=JWT_SECRET), user_service=_failing_service(hasher))

    with TestClient(app) as client:
        response = client.get("/users", headers=auth_header(1, 1))

    assert response.status_code == 500
    assert response.json() == {"error": "Error fetching users"}


# GET /users/{id}


def test_get_own_user(client):
    response = client.get("/users/5", headers=auth_header(5, 2))
    assert response.status_code == 200
    assert response.json()["username"] == "eve"
    assert "password" not in response.json()


def test_get_other_user_as_non_admin(client):
    response = client.get("/users/7", headers=auth_header(5, 2))
    assert response.status_code == 403


def test_get_missing_user(client, admin_headers):
    response = client.get("/users/999", headers=admin_headers)
    assert response.status_code == 404
    assert response.json() == {"error": "User not found"}


# PATCH / PUT /users/{id}


def test_update_other_user_as_non_admin(client):
    response = client.patch("/users/7", json={"username": "hijack"}, headers=auth_header(5, 2))
    assert response.status_code == 403
    assert response.json() == {"error": "Unauthorized to update this user"}


def test_update_without_token(client):
    response = client.patch("/users/3", json={"username": "anon"})
    assert response.status_code == 401


def test_update_username_taken(client, admin_headers):
    response = client.patch("/users/3", json={"username": "ivan"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Username already taken"}


def test_update_email_taken(client, admin_headers):
    response = client.patch("/users/3", json={"email": "ivan@example.com"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Email already taken"}


def test_update_invalid_privilege(client, admin_headers):
    response = client.patch("/users/3", json={"privilege_id": 999}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid privilege"}


def test_update_birthday_in_future(client, admin_headers):
    response = client.patch("/users/3", json={"birthday": "2024-05-02"}, headers=admin_headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Birthday cannot be in the future"}


def test_update_missing_user(client, admin_headers):
    response = client.patch("/users/999", json={"username": "ghost"}, headers=admin_headers)
    assert response.status_code == 404


def test_update_rejects_non_integer_id(client, admin_headers):
    response = client.patch("/users/abc", json={"username": "x"}, headers=admin_headers)
    assert response.status_code == 422
    assert response.json()["error"] == "Invalid request"


@pytest.mark.parametrize(
    "body, field",
    [
        ({"birthday": "not-a-date"}, "birthday"),
        ({"username": ""}, "username"),
        ({"password": ""}, "password"),
    ],
)
def test_update_malformed_body_uses_error_shape(client, admin_headers, cache, body, field):
    response = client.patch("/users/3", json=body, headers=admin_headers)

    assert response.status_code == 422
    data = response.json()
    assert data["error"] == "Invalid request"
    assert data["details"][0]["loc"] == ["body", field]
    assert cache.deleted == []


def test_update_email_and_password(client, admin_headers, cache):
    client.get("/users", headers=admin_headers)
    client.get("/users/3", headers=admin_headers)
    assert {ALL_USERS_KEY, user_key(3)} <= set(cache.entries)

    response = client.patch(
        "/users/3",
        json={"email": "carol@new.example.com", "password": "s3cret!"},
        headers=admin_headers,
    )

    assert response.status_code == 200
    data = response.json()
    assert set(data) == ACCOUNT_FIELDS
    assert data["email"] == "carol@new.example.com"
    assert data["username"] == "carol"
    assert cache.deleted == [ALL_USERS_KEY, user_key(3)]

    users = client.get("/users", headers=admin_headers).json()
    assert users[2]["email"] == "carol@new.example.com"


@pytest.mark.parametrize("method", ["patch", "put"])
def test_update_own_profile(client, method):
    response = getattr(client, method)(
        "/users/5",
        json={"username": "eve2", "birthday": "1999-12-31", "privilege_id": 1},
        headers=auth_header(5, 2),
    )

    assert response.status_code == 200
    data = response.json()
    assert data["username"] == "eve2"
    assert data["birthday"] == "1999-12-31"
    assert data["privilege"] == "user"
