"""End-to-end auth flows through the Flask test client."""

from __future__ import annotations

from tests.factories.user import DEFAULT_PASSWORD, UserFactory
from threadboard.models.user import User

SIGNUP = {"email": "a@x.com", "password": "pw12345678", "name": "A", "nickname": "nickA"}


def _login(client, email, password):
    return client.post("/api/v1/auth/login", json={"email": email, "password": password})


def test_signup_login_and_me(client):
    resp = client.post("/api/v1/auth/signup", json=SIGNUP)
    assert resp.status_code == 201
    assert resp.get_json() == {"message": "Sign-up completed"}

    resp = _login(client, "a@x.com", "pw12345678")
    assert resp.status_code == 200
    tokens = resp.get_json()
    assert set(tokens) == {"accessToken", "refreshToken"}

    resp = client.get(
        "/api/v1/user/me", headers={"Authorization": f"Bearer {tokens['accessToken']}"}
    )
    assert resp.status_code == 200
    assert resp.get_json() == {"email": "a@x.com", "name": "A", "nickname": "nickA"}


def test_login_stores_the_returned_refresh_token(client, session):
    user = UserFactory()
    tokens = _login(client, user.email, DEFAULT_PASSWORD).get_json()

    session.expire_all()
    assert session.get(User, user.id).refresh_token == tokens["refreshToken"]


def test_signup_duplicate_email_is_a_400_conflict(client):
    UserFactory(email="a@x.com")
    resp = client.post("/api/v1/auth/signup", json=SIGNUP)
    assert resp.status_code == 400
    body = resp.get_json()
    assert body["code"] == "conflict"
    assert resp.mimetype == "application/problem+json"


def test_signup_validation(client):
    resp = client.post(
        "/api/v1/auth/signup",
        json={"email": "nope", "password": "short", "name": "A", "nickname": "n"},
    )
    assert resp.status_code == 400
    errors = resp.get_json()["details"]["errors"]
    assert {"email", "password", "nickname"} <= set(errors)


def test_login_mismatch_is_401(client):
    user = UserFactory()
    assert _login(client, user.email, "wrong-password").status_code == 401
    assert _login(client, "ghost@example.com", "whatever1").status_code == 401


def test_refresh_rotates_and_rejects_replay(client):
    user = UserFactory()
    first = _login(client, user.email, DEFAULT_PASSWORD).get_json()

    resp = client.post("/api/v1/auth/refresh-token", json={"refreshToken": first["refreshToken"]})
    assert resp.status_code == 200
    second = resp.get_json()
    assert second["refreshToken"] != first["refreshToken"]

    replay = client.post(
        "/api/v1/auth/refresh-token", json={"refreshToken": first["refreshToken"]}
    )
    assert replay.status_code == 401
    assert replay.get_json()["detail"] == "Refresh token mismatch"


def test_refresh_missing_or_invalid(client):
    assert client.post("/api/v1/auth/refresh-token", json={}).status_code == 400
    resp = client.post("/api/v1/auth/refresh-token", json={"refreshToken": "garbage"})
    assert resp.status_code == 401


def test_access_token_is_not_a_refresh_token(client):
    user = UserFactory()
    tokens = _login(client, user.email, DEFAULT_PASSWORD).get_json()
    resp = client.post(
        "/api/v1/auth/refresh-token", json={"refreshToken": tokens["accessToken"]}
    )
    assert resp.status_code == 401


def test_logout_twice(client):
    user = UserFactory()
    tokens = _login(client, user.email, DEFAULT_PASSWORD).get_json()
    headers = {"Authorization": f"Bearer {tokens['accessToken']}"}

    assert client.post("/api/v1/auth/logout", headers=headers).status_code == 200
    second = client.post("/api/v1/auth/logout", headers=headers)
    assert second.status_code == 400
    assert second.get_json()["detail"] == "Already logged out"

    resp = client.post("/api/v1/auth/refresh-token", json={"refreshToken": tokens["refreshToken"]})
    assert resp.status_code == 401


def test_guard_rejects_missing_malformed_and_deleted(client, auth_headers):
    missing = client.get("/api/v1/user/me")
    assert missing.status_code == 401
    assert missing.get_json()["detail"] == "Access token is missing"

    bad = client.get("/api/v1/user/me", headers={"Authorization": "Bearer not.a.jwt"})
    assert bad.status_code == 401
    assert bad.get_json()["detail"] == "Access token is invalid"

    gone = UserFactory(deleted=True)
    resp = client.get("/api/v1/user/me", headers=auth_headers(gone))
    assert resp.status_code == 401
    assert resp.get_json()["detail"] == "User does not exist"


def test_deleted_account_token_stops_working_immediately(client, auth_headers):
    user = UserFactory()
    headers = auth_headers(user)
    assert client.delete("/api/v1/user/me", headers=headers).status_code == 200
    assert client.get("/api/v1/user/me", headers=headers).status_code == 401


def test_signup_revives_deleted_account(client, session):
    old = UserFactory(email="a@x.com", deleted=True)
    assert client.post("/api/v1/auth/signup", json=SIGNUP).status_code == 201
    assert session.query(User).filter_by(email="a@x.com").count() == 1
    session.expire_all()
    assert session.get(User, old.id).is_active


def test_refresh_without_server_secret_is_a_server_fault(client, app, monkeypatch):
    user = UserFactory()
    tokens = _login(client, user.email, DEFAULT_PASSWORD).get_json()

    monkeypatch.setitem(app.config, "REFRESH_TOKEN_SECRET", None)
    resp = client.post("/api/v1/auth/refresh-token", json={"refreshToken": tokens["refreshToken"]})
    assert resp.status_code == 500
    assert resp.get_json()["code"] == "internal_server_error"
