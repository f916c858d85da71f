"""
Staff business logic shared by the employee and manager routes.

These functions do no authorization of their own; routes call the access
gate before reaching them.
"""
from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from grocery.core.errors import AuthenticationError, NotFoundError, ValidationError
from grocery.features.permissions.models import Role
from grocery.features.users.auth import make_access_token, make_password_hash, verify_password
from grocery.features.users.models import User
from grocery.features.users.schemas import StaffCreate, StaffUpdate
from grocery.utils import get_logger


log = get_logger(__name__)


async def login_user(db: AsyncSession, username: str, password: str) -> tuple[User, str]:
    """
    Check credentials and issue an access token.

    Unknown username and wrong password fail the same way.
    """
    result = await db.execute(select(User).where(User.username == username))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(password, user.password):
        raise AuthenticationError("Invalid credentials", code="INVALID_CREDENTIALS_ERROR")

    token = make_access_token(user.id, user.username, user.name)
    log.info("User %s logged in", user.id)
    return user, token


async def _ensure_username_free(db: AsyncSession, username: str, user_id: str | None = None) -> None:
    stmt = select(User.id).where(User.username == username)
    if user_id is not None:
        stmt = stmt.where(User.id != user_id)
    result = await db.execute(stmt)
    if result.first() is not None:
        raise ValidationError("Username already exists", meta={"username": username})


async def get_staff_member(db: AsyncSession, user_id: str, role: Role) -> User:
    """
    Load a user that holds the given role.

    Raises:
        NotFoundError: no such user with that role
    """
    result = await db.execute(select(User).where(User.id == user_id, User.role_id == role.id))
    user = result.scalar_one_or_none()
    if user is None:
        raise NotFoundError("User not found", meta={"user_id": user_id})
    return user


async def create_staff_member(db: AsyncSession, data: StaffCreate, role: Role) -> User:
    await _ensure_username_free(db, data.username)

    user = User(
        name=data.name,
        username=data.username,
        password=make_password_hash(data.password),
        role_id=role.id,
        store_id=data.store,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    log.info("Created %s %s in store %s", role.code, user.id, user.store_id)
    return user


async def update_staff_member(db: AsyncSession, user: User, data: StaffUpdate) -> User:
    await _ensure_username_free(db, data.username, user.id)

    user.name = data.name
    user.username = data.username
    user.store_id = data.store
    if data.password:
        user.password = make_password_hash(data.password)

    await db.commit()
    await db.refresh(user)
    return user


async def delete_staff_member(db: AsyncSession, user: User) -> User:
    await db.delete(user)
    await db.commit()
    log.info("Deleted user %s", user.id)
    return user


async def list_staff(db: AsyncSession, store_ids: Sequence[str], role: Role) -> Sequence[User]:
    """Users with the given role whose home store is one of store_ids."""
    if not store_ids:
        return []
    result = await db.execute(
        select(User)
        .where(User.role_id == role.id, User.store_id.in_(store_ids))
        .order_by(User.name)
    )
    return result.scalars().all()
