from datetime import datetime, timedelta, timezone

import jwt
import pytest

from grocery.core import config
from grocery.core.errors import AuthenticationError, TokenExpiredError
from grocery.features.users.auth import (
    make_access_token,
    make_password_hash,
    verify_access_token,
    verify_password,
)


def _token(**overrides):
    now = datetime.now(timezone.utc)
    payload = {
        "sub": "someone",
        "tokenType": config.TOKEN_ACCESS_TYPE,
        "iss": config.JWT_ISS,
        "iat": now,
        "exp": now + timedelta(hours=1),
    }
    payload.update(overrides)
    return jwt.encode(payload, config.TOKEN_ACCESS_SECRET, algorithm=config.JWT_ALGORITHM)


def test_password_hash():
    password_hash = make_password_hash("secret")
    assert password_hash != "secret"
    assert verify_password("secret", password_hash)
    assert not verify_password("Secret", password_hash)
    assert not verify_password("secret", "plain-text")


def test_access_token_round_trip():
    payload = verify_access_token(make_access_token("user-1", "ana", "Ana"))
    assert payload["sub"] == "user-1"
    assert payload["username"] == "ana"
    assert payload["iss"] == config.JWT_ISS


def test_expired_token():
    expired = _token(exp=datetime.now(timezone.utc) - timedelta(minutes=1))
    with pytest.raises(TokenExpiredError) as exc_info:
        verify_access_token(expired)
    assert exc_info.value.status_code == 419


@pytest.mark.parametrize("token", [
    "not-a-token",
    _token(tokenType="TOKEN_TYPE_REFRESH"),
    _token(iss="someone-else"),
    jwt.encode({"sub": "someone", "exp": 9999999999}, "other-secret", algorithm="HS512"),
])
def test_invalid_token(token):
    with pytest.raises(AuthenticationError) as exc_info:
        verify_access_token(token)
    assert exc_info.value.code == "TOKEN_VERIFY_ERROR"
    assert exc_info.value.status_code == 401


async def test_login(client, staff):
    response = await client.post("/login", json={"username": "manager_a", "password": "passwordpassword"})
    assert response.status_code == 200
    body = response.json()
    assert body["user"]["id"] == staff["manager_a"].id
    assert "password" not in body["user"]
    assert body["token_type"] == "bearer"

    response = await client.get(f"/manager/{staff['manager_b'].id}",
                                headers={"Authorization": f"Bearer {body['token']}"})
    assert response.status_code == 200


@pytest.mark.parametrize("username, password", [
    ("manager_a", "wrong-password"),
    ("nobody", "passwordpassword"),
])
async def test_login_failure(client, staff, username, password):
    response = await client.post("/login", json={"username": username, "password": password})
    assert response.status_code == 401
    assert response.json() == {"code": "INVALID_CREDENTIALS_ERROR", "message": "Invalid credentials"}


async def test_login_validation(client):
    response = await client.post("/login", json={"username": "manager_a"})
    assert response.status_code == 400
    assert "password" in response.json()


async def test_expired_token_on_route(client, staff, stores):
    expired = _token(sub=staff["manager_a"].id, exp=datetime.now(timezone.utc) - timedelta(minutes=1))
    response = await client.get(f"/stores/{stores['A'].id}/employees", headers={"Authorization": f"Bearer {expired}"})
    assert response.status_code == 419
    assert response.json()["code"] == "TOKEN_EXPIRED_ERROR"


async def test_garbage_token_on_route(client, stores):
    response = await client.get(f"/stores/{stores['A'].id}/employees", headers={"Authorization": "Bearer garbage"})
    assert response.status_code == 401


async def test_root_and_health(client):
    response = await client.get("/")
    assert response.status_code == 200
    assert response.json()["success"] is True

    response = await client.get("/health")
    assert response.json() == {"status": "healthy"}
