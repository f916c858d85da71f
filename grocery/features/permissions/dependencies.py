"""
Role seeding, role table loading and FastAPI dependencies for route protection.
"""
from typing import Annotated
from fastapi import Depends, Request
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from grocery.core.database.engine import get_db
from grocery.features.permissions.acl import DEFAULT_ROLES, PermissionToken, RoleTable
from grocery.features.permissions.gate import AccessGate, Actor
from grocery.features.permissions.models import Role
from grocery.features.stores.repository import StoreRepository
from grocery.features.users.dependencies import get_current_actor
from grocery.utils import get_logger


log = get_logger(__name__)


async def seed_default_roles(db: AsyncSession) -> list[Role]:
    """
    Insert the default roles that are missing. Existing roles are left as is.

    Returns:
        Newly created roles
    """
    result = await db.execute(select(Role.code))
    existing = set(result.scalars().all())

    created = []
    for code, definition in DEFAULT_ROLES.items():
        if code.value in existing:
            continue
        role = Role(
            name=definition["name"],
            code=code.value,
            acl=[token.value for token in definition["acl"]],
        )
        db.add(role)
        created.append(role)

    if created:
        await db.flush()
        log.info("Seeded roles: %s", ", ".join(role.code for role in created))
    return created


async def load_role_table(db: AsyncSession) -> RoleTable:
    """Build the role table from the roles currently stored."""
    result = await db.execute(select(Role))
    table = RoleTable.from_roles(result.scalars().all())
    log.info("Loaded ACLs for %d roles", len(table))
    return table


async def get_role_table(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db)]
) -> RoleTable:
    """
    Role table shared by the whole application.

    Built at startup; built on first use if startup did not run.
    """
    table = getattr(request.app.state, "role_table", None)
    if table is None:
        table = await load_role_table(db)
        request.app.state.role_table = table
    return table


async def get_access_gate(
    db: Annotated[AsyncSession, Depends(get_db)],
    roles: Annotated[RoleTable, Depends(get_role_table)]
) -> AccessGate:
    return AccessGate(StoreRepository(db), roles)


def require_permission(action: PermissionToken):
    """
    FastAPI dependency requiring the actor's role to grant an action.

    Only the role is checked; routes still call AccessGate.authorize once the
    target store is known.

    Usage:
        @router.get("/{user_id}")
        async def read_employee(
            actor: Actor = Depends(require_permission(PermissionToken.READ_EMPLOYEE))
        ):
            ...
    """
    async def permission_dependency(
        actor: Annotated[Actor, Depends(get_current_actor)],
        gate: Annotated[AccessGate, Depends(get_access_gate)]
    ) -> Actor:
        gate.check_permission(actor, action)
        return actor

    return permission_dependency
