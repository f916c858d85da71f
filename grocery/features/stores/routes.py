"""
Store staff listing routes.

A listing is authorized against the addressed store first; the descendant
lookup only runs once the actor is known to be allowed.
"""
from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from grocery.core.database.engine import get_db
from grocery.features.permissions.acl import PermissionToken, RoleTable
from grocery.features.permissions.dependencies import get_access_gate, get_role_table
from grocery.features.permissions.gate import AccessGate, Actor
from grocery.features.stores.access import descendants_of
from grocery.features.users.dependencies import get_current_actor
from grocery.features.users.schemas import StaffResponse
from grocery.features.users.service import list_staff


router = APIRouter(tags=["stores"])


async def _subtree_ids(gate: AccessGate, store_id: str) -> list[str]:
    stores = await descendants_of(gate.repository, store_id)
    return [store.id for store in stores]


@router.get("/{store_id}/employees", response_model=list[StaffResponse])
async def store_employees(
    store_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
    roles: Annotated[RoleTable, Depends(get_role_table)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Employees whose home store is exactly this store."""
    await gate.authorize(actor, PermissionToken.EMPLOYEES_LIST, store_id)
    return await list_staff(db, [store_id], roles.employee_role)


@router.get("/{store_id}/descendants/employees", response_model=list[StaffResponse])
async def store_and_descendants_employees(
    store_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
    roles: Annotated[RoleTable, Depends(get_role_table)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Employees of this store and every store below it."""
    await gate.authorize(actor, PermissionToken.EMPLOYEES_LIST, store_id)
    return await list_staff(db, await _subtree_ids(gate, store_id), roles.employee_role)


@router.get("/{store_id}/managers", response_model=list[StaffResponse])
async def store_managers(
    store_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
    roles: Annotated[RoleTable, Depends(get_role_table)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Managers whose home store is exactly this store."""
    await gate.authorize(actor, PermissionToken.MANAGERS_LIST, store_id)
    return await list_staff(db, [store_id], roles.manager_role)


@router.get("/{store_id}/descendants/managers", response_model=list[StaffResponse])
async def store_and_descendants_managers(
    store_id: str,
    actor: Annotated[Actor, Depends(get_current_actor)],
    gate: Annotated[AccessGate, Depends(get_access_gate)],
    roles: Annotated[RoleTable, Depends(get_role_table)],
    db: Annotated[AsyncSession, Depends(get_db)]
):
    """Managers of this store and every store below it."""
    await gate.authorize(actor, PermissionToken.MANAGERS_LIST, store_id)
    return await list_staff(db, await _subtree_ids(gate, store_id), roles.manager_role)
