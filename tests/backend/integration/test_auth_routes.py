import datetime as dt
import time

import pytest

from app.models.token import Token
from app.services.token_service import utc_now
from helpers import PASSWORD, basic_header, bearer_header


pytestmark = pytest.mark.asyncio


async def post_auth(client, credentials: dict):
    return await client.post("/api/1.0/auth", json=credentials)


async def test_login_success_returns_user_and_token(client, create_user):
    user = await create_user(username="user1", email="user1@mail.com")
    resp = await post_auth(client, {"email": "user1@mail.com", "password": PASSWORD})
    body = resp.json()

    assert resp.status_code == 200
    assert list(body.keys()) == ["id", "username", "image", "token"]
    assert body["id"] == user.id
    assert body["username"] == "user1"
    assert len(body["token"]) > 0
    assert await Token.filter(token=body["token"], user_id=user.id).exists()


async def test_repeated_logins_issue_distinct_tokens(client, create_user, login):
    user = await create_user()
    first = await login(user.email)
    second = await login(user.email)
    assert first != second
    assert await Token.filter(user_id=user.id).count() == 2


async def test_login_failures(client, create_user):
    await create_user(email="user1@mail.com")
    inactive = await create_user(email="inactive@mail.com", inactive=True)

    unknown = await post_auth(client, {"email": "nobody@mail.com", "password": PASSWORD})
    assert unknown.status_code == 401

    wrong_password = await post_auth(client, {"email": "user1@mail.com", "password": "password"})
    assert wrong_password.status_code == 401

    missing_email = await post_auth(client, {"password": PASSWORD})
    assert missing_email.status_code == 401

    missing_password = await post_auth(client, {"email": "user1@mail.com"})
    assert missing_password.status_code == 401

    inactive_resp = await post_auth(client, {"email": inactive.email, "password": PASSWORD})
    assert inactive_resp.status_code == 403
    assert inactive_resp.json()["message"] == "Account is inactive"


async def test_login_without_body_is_unauthorized(client):
    resp = await client.post("/api/1.0/auth")
    assert resp.status_code == 401
    assert resp.json()["message"] == "Incorrect credentials"


async def test_login_error_body(client):
    now_ms = int(time.time() * 1000)
    resp = await post_auth(client, {"email": "user1@mail.com", "password": PASSWORD})
    body = resp.json()

    assert list(body.keys()) == ["path", "timestamp", "message"]
    assert body["path"] == "/api/1.0/auth"
    assert body["timestamp"] >= now_ms
    assert body["message"] == "Incorrect credentials"


async def test_logout_without_token_is_ok(client):
    resp = await client.post("/api/1.0/logout")
    assert resp.status_code == 200


async def test_logout_removes_token(client, create_user, login):
    user = await create_user()
    token = await login(user.email)
    other_session = await login(user.email)

    resp = await client.post("/api/1.0/logout", headers=bearer_header(token))

    assert resp.status_code == 200
    assert await Token.get_or_none(token=token) is None
    # Only the presented session ends
    assert await Token.get_or_none(token=other_session) is not None


async def _put_username(client, user_id: int, headers: dict):
    return await client.put(
        f"/api/1.0/users/{user_id}",
        json={"username": "user1-updated"},
        headers=headers,
    )


async def test_token_idle_longer_than_a_week_is_forbidden_and_removed(client, create_user):
    user = await create_user()
    await Token.create(
        token="test-token",
        user=user,
        last_used_at=utc_now() - dt.timedelta(days=7, milliseconds=1),
    )

    resp = await _put_username(client, user.id, bearer_header("test-token"))

    assert resp.status_code == 403
    assert await Token.get_or_none(token="test-token") is None


async def test_unexpired_token_is_refreshed_on_authenticated_endpoint(client, create_user):
    user = await create_user()
    await Token.create(token="test-token", user=user, last_used_at=utc_now() - dt.timedelta(days=4))

    right_before_request = utc_now()
    resp = await _put_username(client, user.id, bearer_header("test-token"))

    assert resp.status_code == 200
    stored = await Token.get(token="test-token")
    assert stored.last_used_at >= right_before_request


async def test_unexpired_token_is_refreshed_on_unauthenticated_endpoint(client, create_user):
    user = await create_user()
    await Token.create(token="test-token", user=user, last_used_at=utc_now() - dt.timedelta(days=4))

    right_before_request = utc_now()
    # Unknown user: the route fails with 404, the token is refreshed anyway
    resp = await client.get("/api/1.0/users/5000", headers=bearer_header("test-token"))

    assert resp.status_code == 404
    stored = await Token.get(token="test-token")
    assert stored.last_used_at >= right_before_request


async def test_invalid_bearer_token_on_public_endpoint_proceeds_anonymously(client):
    resp = await client.get("/api/1.0/hoaxes", headers=bearer_header("123"))
    assert resp.status_code == 200


async def test_basic_credentials_authorize_owner_update(client, create_user):
    user = await create_user(email="user1@mail.com")

    ok = await _put_username(client, user.id, basic_header("user1@mail.com", PASSWORD))
    assert ok.status_code == 200

    wrong = await _put_username(client, user.id, basic_header("user1@mail.com", "password"))
    assert wrong.status_code == 403

    unknown = await _put_username(client, user.id, basic_header("user1000@mail.com", PASSWORD))
    assert unknown.status_code == 403


async def test_basic_credentials_of_inactive_owner_are_forbidden(client, create_user):
    user = await create_user(email="user1@mail.com", inactive=True)
    resp = await _put_username(client, user.id, basic_header("user1@mail.com", PASSWORD))
    assert resp.status_code == 403


async def test_malformed_authorization_header_is_anonymous(client, create_user):
    user = await create_user()
    for header in ("Bearer", "Basic %%%", "Token abc"):
        resp = await _put_username(client, user.id, {"Authorization": header})
        assert resp.status_code == 403
