"""
Subtree containment and descendant queries.

Both operations are single range queries against the repository: a store is
inside another's subtree when its (left, right) interval is nested within it.
"""
from collections.abc import Mapping, Sequence
from typing import Any

from grocery.core.errors import ForbiddenError, ForbiddenKind, NotFoundError
from grocery.features.stores.models import Store
from grocery.features.stores.repository import StoreRepository
from grocery.features.stores.schemas import StoreDefinition
from grocery.features.stores.tree import encode
from grocery.utils import get_logger


log = get_logger(__name__)


async def get_store_or_404(repository: StoreRepository, store_id: str) -> Store:
    store = await repository.find_store_by_id(store_id)
    if store is None:
        raise NotFoundError("Store not found", meta={"store_id": store_id})
    return store


async def _find_within(repository: StoreRepository, origin: Store, target_store_id: str) -> Store | None:
    matches = await repository.find_stores(
        Store.id == target_store_id,
        Store.left >= origin.left,
        Store.right <= origin.right,
    )
    return matches[0] if matches else None


async def assert_access_from(repository: StoreRepository, origin: Store, target_store_id: str) -> bool:
    """
    Require target_store_id to be origin or one of its descendants.

    A target that does not exist at all fails exactly like one that exists
    outside the subtree, so the error says nothing about the tree's shape.

    Raises:
        ForbiddenError: kind TARGET_OUTSIDE_SUBTREE
    """
    if await _find_within(repository, origin, target_store_id) is None:
        raise ForbiddenError(
            ForbiddenKind.TARGET_OUTSIDE_SUBTREE,
            meta={"origin_store_id": origin.id, "target_store_id": target_store_id},
        )
    return True


async def assert_access(repository: StoreRepository, origin_store_id: str, target_store_id: str) -> bool:
    """
    Check that the target store lies within the origin store's subtree.

    Raises:
        NotFoundError: origin store does not resolve
        ForbiddenError: target is outside the subtree or does not exist
    """
    origin = await get_store_or_404(repository, origin_store_id)
    return await assert_access_from(repository, origin, target_store_id)


async def contains(repository: StoreRepository, origin_store_id: str, target_store_id: str) -> bool:
    """Non-raising form of assert_access. The origin must still resolve."""
    origin = await get_store_or_404(repository, origin_store_id)
    return await _find_within(repository, origin, target_store_id) is not None


async def descendants_of(
    repository: StoreRepository,
    store_id: str,
    include_self: bool = True,
) -> Sequence[Store]:
    """
    All stores in the subtree rooted at store_id, ordered by left.

    Raises:
        NotFoundError: store does not resolve
    """
    store = await get_store_or_404(repository, store_id)
    criteria = [Store.left >= store.left, Store.right <= store.right]
    if not include_self:
        criteria.append(Store.id != store.id)
    return await repository.find_stores(*criteria)


async def provision_store_tree(
    repository: StoreRepository,
    definition: StoreDefinition | Mapping[str, Any],
) -> list[Store]:
    """
    Encode a store definition and insert the whole tree.

    Provisioning happens once, before any authorization traffic; the tree is
    not restructured afterwards.
    """
    stores = encode(definition)
    await repository.bulk_insert(stores)
    log.info("Provisioned %d stores under %r", len(stores), stores[0].name)
    return stores
