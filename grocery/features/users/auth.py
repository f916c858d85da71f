"""
Password hashing and access token utilities.
"""
from datetime import datetime, timedelta, timezone

import bcrypt
import jwt

from grocery.core import config
from grocery.core.errors import AuthenticationError, TokenExpiredError


def make_password_hash(password: str) -> str:
    """Hash a password using bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def make_access_token(user_id: str, username: str, name: str) -> str:
    """
    Sign an access token for a user.

    The subject is the user id; role and store are resolved from the
    database on every request rather than trusted from the token.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "sub": user_id,
        "username": username,
        "name": name,
        "tokenType": config.TOKEN_ACCESS_TYPE,
        "iss": config.JWT_ISS,
        "iat": now,
        "exp": now + timedelta(minutes=config.TOKEN_ACCESS_EXP_MINUTES),
    }
    return jwt.encode(payload, config.TOKEN_ACCESS_SECRET, algorithm=config.JWT_ALGORITHM)


def verify_access_token(token: str) -> dict:
    """
    Verify an access token and return its payload.

    Raises:
        TokenExpiredError: token has expired
        AuthenticationError: token is invalid or not an access token
    """
    try:
        payload = jwt.decode(
            token,
            config.TOKEN_ACCESS_SECRET,
            algorithms=[config.JWT_ALGORITHM],
            issuer=config.JWT_ISS,
            options={"require": ["sub", "exp"]},
        )
    except jwt.ExpiredSignatureError:
        raise TokenExpiredError()
    except jwt.InvalidTokenError as e:
        raise AuthenticationError(f"Token verify error: {e}", code="TOKEN_VERIFY_ERROR")

    if payload.get("tokenType") != config.TOKEN_ACCESS_TYPE:
        raise AuthenticationError("Token verify error: not an access token", code="TOKEN_VERIFY_ERROR")

    return payload
