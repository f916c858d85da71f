"""
Async engine, session factory and the `get_db` request dependency.

The URL comes from DATABASE_URL; SQLite through aiosqlite unless told
otherwise. Any async SQLAlchemy driver works without code changes here.
"""
from collections.abc import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import NullPool

from grocery.core import config


def make_engine(url: str) -> AsyncEngine:
    # SQLite connections are cheap and must not be shared across event loops
    return create_async_engine(url, poolclass=NullPool if url.startswith("sqlite") else None)


def make_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(bind, class_=AsyncSession, expire_on_commit=False, autoflush=False)


engine = make_engine(config.SQLALCHEMY_DATABASE_URL)
AsyncSessionLocal = make_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    One session per request, committed when the handler returns normally.

    Usage in FastAPI routes:
        @router.get("/{store_id}/employees")
        async def store_employees(db: Annotated[AsyncSession, Depends(get_db)]):
            ...
    """
    async with AsyncSessionLocal() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


async def init_db(bind: AsyncEngine = engine):
    """Create missing tables. Run at startup and by the seed script."""
    from grocery.core.database.base import Base

    # Registers every mapped table on Base.metadata
    from grocery.features.stores.models import Store  # noqa: F401
    from grocery.features.permissions.models import Role  # noqa: F401
    from grocery.features.users.models import User  # noqa: F401

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
