"""
Store repository.

The access-control engine never touches the session directly; it is handed a
StoreRepository and only issues the queries below.
"""
from collections.abc import Iterable, Sequence
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from grocery.features.stores.models import Store


class StoreRepository:
    """
    Read and bulk-insert access to store nodes.

    Usage:
        repository = StoreRepository(db)
        origin = await repository.find_store_by_id(origin_id)
        matches = await repository.find_stores(
            Store.id == target_id,
            Store.left >= origin.left,
            Store.right <= origin.right,
        )
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_store_by_id(self, store_id: str) -> Store | None:
        result = await self.db.execute(select(Store).where(Store.id == store_id))
        return result.scalar_one_or_none()

    async def find_stores(self, *criteria: Any) -> Sequence[Store]:
        """
        Find stores matching every criterion, ordered by left.

        Criteria are SQLAlchemy column expressions on Store, typically
        interval comparisons on left/right and equality on id.
        """
        result = await self.db.execute(select(Store).where(*criteria).order_by(Store.left))
        return result.scalars().all()

    async def bulk_insert(self, stores: Iterable[Store]) -> list[Store]:
        stores = list(stores)
        self.db.add_all(stores)
        await self.db.flush()
        return stores
