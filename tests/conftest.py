"""
Shared fixtures.

Every test gets its own SQLite database file with the default roles seeded
and the reference tree provisioned:

    Root[1,14]
      A[2,9]
        B[3,6]
          C[4,5]
        D[7,8]
      E[10,13]
        F[11,12]
"""
from collections.abc import AsyncIterator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from grocery.core.database.engine import get_db, init_db, make_engine, make_session_factory
from grocery.core.limiter import limiter
from grocery.features.permissions.acl import RoleTable
from grocery.features.permissions.dependencies import load_role_table, seed_default_roles
from grocery.features.permissions.models import Role
from grocery.features.stores.access import provision_store_tree
from grocery.features.stores.models import Store
from grocery.features.stores.repository import StoreRepository
from grocery.features.users.auth import make_access_token, make_password_hash
from grocery.features.users.models import User
from grocery.main import app


PASSWORD = "passwordpassword"
PASSWORD_HASH = make_password_hash(PASSWORD)

SCENARIO_TREE = {
    "name": "Root",
    "children": [
        {
            "name": "A",
            "children": [
                {"name": "B", "children": [{"name": "C"}]},
                {"name": "D"},
            ],
        },
        {"name": "E", "children": [{"name": "F"}]},
    ],
}


@pytest.fixture
async def engine(tmp_path):
    engine = make_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_factory(engine)


@pytest.fixture
async def db(session_factory) -> AsyncIterator[AsyncSession]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def roles(db) -> RoleTable:
    await seed_default_roles(db)
    await db.commit()
    return await load_role_table(db)


@pytest.fixture
async def stores(db) -> dict[str, Store]:
    """Reference tree keyed by store name."""
    provisioned = await provision_store_tree(StoreRepository(db), SCENARIO_TREE)
    await db.commit()
    return {store.name: store for store in provisioned}


@pytest.fixture
def make_user(db):
    async def _make_user(username: str, role: Role, store: Store, name: str | None = None) -> User:
        user = User(
            name=name or username.title(),
            username=username,
            password=PASSWORD_HASH,
            role_id=role.id,
            store_id=store.id,
        )
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

    return _make_user


@pytest.fixture
async def staff(roles, stores, make_user) -> dict[str, User]:
    """
    Managers at A, B and F; employees at B, C, D and E.
    """
    manager, employee = roles.manager_role, roles.employee_role
    return {
        "manager_a": await make_user("manager_a", manager, stores["A"], "Ana Manager"),
        "manager_b": await make_user("manager_b", manager, stores["B"], "Bojan Manager"),
        "manager_f": await make_user("manager_f", manager, stores["F"], "Filip Manager"),
        "employee_b": await make_user("employee_b", employee, stores["B"], "Branka Employee"),
        "employee_c": await make_user("employee_c", employee, stores["C"], "Cvijeta Employee"),
        "employee_d": await make_user("employee_d", employee, stores["D"], "Dragan Employee"),
        "employee_e": await make_user("employee_e", employee, stores["E"], "Elena Employee"),
    }


@pytest.fixture
def auth_headers():
    def _auth_headers(user: User) -> dict[str, str]:
        token = make_access_token(user.id, user.username, user.name)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
async def client(session_factory, roles) -> AsyncIterator[AsyncClient]:
    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.state.role_table = roles
    limiter.enabled = False
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()
        app.state.role_table = None
        limiter.enabled = True
