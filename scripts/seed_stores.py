"""
Seed script to provision the store tree and sample staff.

Run this script once, before the server takes traffic, to create:
- Default roles (Manager, Employee)
- The store hierarchy with nested-set intervals
- One manager and one employee per store

Usage:
    python -m scripts.seed_stores
"""
import asyncio
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from grocery.core.database.engine import get_db, init_db
from grocery.features.permissions.dependencies import load_role_table, seed_default_roles
from grocery.features.permissions.acl import RoleTable
from grocery.features.stores.access import provision_store_tree
from grocery.features.stores.models import Store
from grocery.features.stores.repository import StoreRepository
from grocery.features.users.auth import make_password_hash
from grocery.features.users.models import User
from grocery.utils import get_logger


log = get_logger(__name__)


DEFAULT_PASSWORD = "passwordpassword"

STORE_TREE = {
    "name": "Srbija",
    "children": [
        {
            "name": "Vojvodina",
            "children": [
                {
                    "name": "Severnobacki okrug",
                    "children": [
                        {"name": "Subotica", "children": [{"name": "Radnja 1"}]},
                    ],
                },
                {
                    "name": "Juznobacki okrug",
                    "children": [
                        {
                            "name": "Novi Sad",
                            "children": [
                                {"name": "Detelinara", "children": [{"name": "Radnja 2"}, {"name": "Radnja 3"}]},
                                {"name": "Liman", "children": [{"name": "Radnja 4"}, {"name": "Radnja 5"}]},
                            ],
                        },
                    ],
                },
            ],
        },
        {
            "name": "Grad Beograd",
            "children": [
                {
                    "name": "Novi Beograd",
                    "children": [
                        {"name": "Bezanija", "children": [{"name": "Radnja 6"}]},
                    ],
                },
                {
                    "name": "Vracar",
                    "children": [
                        {"name": "Neimar", "children": [{"name": "Radnja 7"}]},
                        {"name": "Crveni krst", "children": [{"name": "Radnja 8"}, {"name": "Radnja 9"}]},
                    ],
                },
            ],
        },
    ],
}


def _slug(name: str) -> str:
    return "".join(c for c in name.lower().replace(" ", "-") if c.isalnum() or c == "-")


async def seed_stores(db: AsyncSession) -> list[Store]:
    """
    Provision the store tree unless stores already exist.

    Returns:
        Stores in pre-order
    """
    repository = StoreRepository(db)
    existing = await repository.find_stores()
    if existing:
        log.info(f"{len(existing)} stores already exist, skipping tree provisioning")
        return list(existing)

    stores = await provision_store_tree(repository, STORE_TREE)
    await db.commit()
    return stores


async def seed_staff(db: AsyncSession, stores: list[Store], roles: RoleTable):
    """
    Create a manager and an employee for every store.

    Usernames are derived from the store name; existing usernames are skipped.
    """
    log.info("Creating sample staff...")
    password_hash = make_password_hash(DEFAULT_PASSWORD)
    created = 0

    for store in stores:
        for role, prefix in ((roles.manager_role, "manager"), (roles.employee_role, "employee")):
            username = f"{prefix}.{_slug(store.name)}"
            result = await db.execute(select(User.id).where(User.username == username))
            if result.first() is not None:
                log.debug(f"User '{username}' already exists, skipping")
                continue

            db.add(User(
                name=f"{role.name} {store.name}",
                username=username,
                password=password_hash,
                role_id=role.id,
                store_id=store.id,
            ))
            created += 1

    await db.commit()
    log.info(f"Created {created} staff members")


async def main():
    """Main function to seed roles, stores and staff."""
    log.info("Starting store seeding...")

    log.info("Initializing database tables...")
    await init_db()

    async for db in get_db():
        try:
            await seed_default_roles(db)
            await db.commit()
            roles = await load_role_table(db)

            stores = await seed_stores(db)
            await seed_staff(db, stores, roles)

            log.info("Store seeding completed successfully!")
            log.info(f"All sample users share the password '{DEFAULT_PASSWORD}'")
        except Exception as e:
            log.error(f"Error seeding stores: {e}", exc_info=True)
            await db.rollback()
            raise

        break  # Only use first session


if __name__ == "__main__":
    asyncio.run(main())
