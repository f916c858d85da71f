"""
FastAPI dependencies for authentication.

This is the identity layer: it turns a bearer token into an Actor once per
request. Everything downstream receives the Actor and never re-derives it.
"""
from typing import Annotated
from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from slowapi.util import get_remote_address
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from grocery.core.database.engine import get_db
from grocery.core.errors import AuthenticationError
from grocery.features.permissions.gate import Actor
from grocery.features.users.auth import verify_access_token
from grocery.features.users.models import User


security = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)]
) -> User:
    """
    Get the current authenticated user from the bearer token.

    Raises:
        AuthenticationError: missing or invalid token, or unknown user
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError()

    payload = verify_access_token(credentials.credentials)

    result = await db.execute(select(User).where(User.id == payload["sub"]))
    user = result.scalar_one_or_none()

    if user is None:
        raise AuthenticationError()

    return user


async def get_current_actor(
    user: Annotated[User, Depends(get_current_user)]
) -> Actor:
    """
    Resolve the Actor (role and home store) for the current user.

    Usage:
        @router.get("/{store_id}/employees")
        async def store_employees(actor: Actor = Depends(get_current_actor)):
            ...
    """
    return Actor(
        id=user.id,
        role_id=user.role_id,
        role=user.role,
        store_id=user.store_id,
        store=user.store,
    )


def get_authorization_header(request: Request) -> str:
    """
    Rate limit key: the bearer token when present, else the client address.
    """
    return request.headers.get("Authorization") or get_remote_address(request)
