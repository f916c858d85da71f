"""
Login and staff routes.

Employee and manager routes mirror each other; each one checks the role
permission first and then confines the target store to the actor's subtree.
"""
from typing import Annotated
from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from grocery.core import config
from grocery.core.database.engine import get_db
from grocery.core.errors import ForbiddenError, ForbiddenKind, NotFoundError
from grocery.core.limiter import limiter
from grocery.features.permissions.acl import PermissionToken, RoleTable
from grocery.features.permissions.dependencies import get_access_gate, get_role_table, require_permission
from grocery.features.permissions.gate import AccessGate, Actor
from grocery.features.permissions.models import Role
from grocery.features.users.dependencies import get_current_actor
from grocery.features.users.models import User
from grocery.features.users.schemas import (
    LoginRequest,
    LoginResponse,
    StaffCreate,
    StaffResponse,
    StaffUpdate,
)
from grocery.features.users.service import (
    create_staff_member,
    delete_staff_member,
    get_staff_member,
    login_user,
    update_staff_member,
)


auth_router = APIRouter(tags=["auth"])
employee_router = APIRouter(tags=["employees"])
manager_router = APIRouter(tags=["managers"])


async def _load_staff_member(db: AsyncSession, user_id: str, role: Role) -> User:
    # an id that does not resolve is refused like a user outside the subtree
    try:
        return await get_staff_member(db, user_id, role)
    except NotFoundError:
        raise ForbiddenError(ForbiddenKind.TARGET_OUTSIDE_SUBTREE, meta={"user_id": user_id}) from None


@auth_router.post("/login", response_model=LoginResponse)
@limiter.limit(config.LOGIN_RATE_LIMIT)
async def login(
    request: Request,
    credentials: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Exchange username and password for an access token."""
    user, token = await login_user(db, credentials.username, credentials.password)
    return LoginResponse(user=StaffResponse.model_validate(user), token=token)


# Employees
@employee_router.post("", response_model=StaffResponse)
async def create_employee(
    data: StaffCreate,
    actor: Annotated[Actor, Depends(get_current_actor)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
    roles: Annotated[RoleTable, Depends(get_role_table)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Create an employee in a store inside the actor's subtree."""
    await gate.authorize(actor, PermissionToken.CREATE_EMPLOYEE, data.store)
    return await create_staff_member(db, data, roles.employee_role)


@employee_router.put("/{user_id}", response_model=StaffResponse)
async def update_employee(
    user_id: str,
    data: StaffUpdate,
    actor: Annotated[Actor, Depends(require_permission(PermissionToken.UPDATE_EMPLOYEE))],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
    roles: Annotated[RoleTable, Depends(get_role_table)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Update an employee. Both the current and the new store must be in the actor's subtree."""
    user = await _load_staff_member(db, user_id, roles.employee_role)
    await gate.authorize(actor, PermissionToken.UPDATE_EMPLOYEE, user.store_id)
    await gate.authorize(actor, PermissionToken.UPDATE_EMPLOYEE, data.store)
    return await update_staff_member(db, user, data)


@employee_router.get("/{user_id}", response_model=StaffResponse)
async def read_employee(
    user_id: str,
    actor: Annotated[Actor, Depends(require_permission(PermissionToken.READ_EMPLOYEE))],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
    roles: Annotated[RoleTable, Depends(get_role_table)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    user = await _load_staff_member(db, user_id, roles.employee_role)
    await gate.authorize(actor, PermissionToken.READ_EMPLOYEE, user.store_id)
    return user


@employee_router.delete("/{user_id}", response_model=StaffResponse)
async def delete_employee(
    user_id: str,
    actor: Annotated[Actor, Depends(require_permission(PermissionToken.DELETE_EMPLOYEE))],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
    roles: Annotated[RoleTable, Depends(get_role_table)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    user = await _load_staff_member(db, user_id, roles.employee_role)
    await gate.authorize(actor, PermissionToken.DELETE_EMPLOYEE, user.store_id)
    return await delete_staff_member(db, user)


# Managers
@manager_router.post("", response_model=StaffResponse)
async def create_manager(
    data: StaffCreate,
    actor: Annotated[Actor, Depends(get_current_actor)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
    roles: Annotated[RoleTable, Depends(get_role_table)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Create a manager in a store inside the actor's subtree."""
    await gate.authorize(actor, PermissionToken.CREATE_MANAGER, data.store)
    return await create_staff_member(db, data, roles.manager_role)


@manager_router.put("/{user_id}", response_model=StaffResponse)
async def update_manager(
    user_id: str,
    data: StaffUpdate,
    actor: Annotated[Actor, Depends(require_permission(PermissionToken.UPDATE_MANAGER))],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
    roles: Annotated[RoleTable, Depends(get_role_table)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    user = await _load_staff_member(db, user_id, roles.manager_role)
    await gate.authorize(actor, PermissionToken.UPDATE_MANAGER, user.store_id)
    await gate.authorize(actor, PermissionToken.UPDATE_MANAGER, data.store)
    return await update_staff_member(db, user, data)


@manager_router.get("/{user_id}", response_model=StaffResponse)
async def read_manager(
    user_id: str,
    actor: Annotated[Actor, Depends(require_permission(PermissionToken.READ_MANAGER))],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
    roles: Annotated[RoleTable, Depends(get_role_table)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    user = await _load_staff_member(db, user_id, roles.manager_role)
    await gate.authorize(actor, PermissionToken.READ_MANAGER, user.store_id)
    return user


@manager_router.delete("/{user_id}", response_model=StaffResponse)
async def delete_manager(
    user_id: str,
    actor: Annotated[Actor, Depends(require_permission(PermissionToken.DELETE_MANAGER))],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
    roles: Annotated[RoleTable, Depends(get_role_table)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    user = await _load_staff_member(db, user_id, roles.manager_role)
    await gate.authorize(actor, PermissionToken.DELETE_MANAGER, user.store_id)
    return await delete_staff_member(db, user)
