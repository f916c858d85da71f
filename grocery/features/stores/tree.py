"""
Nested-set encoding of the store tree.

A single depth-first traversal numbers every node twice from one counter:
once on the way down (left) and once on the way back up (right). The result
is that every subtree occupies a contiguous interval, and ancestry becomes
interval containment.

    Root[1,8]
      A[2,5]
        B[3,4]
      C[6,7]
"""
import itertools
from collections.abc import Iterator, Mapping
from typing import Any, Protocol

from pydantic import ValidationError as PydanticValidationError

from grocery.core.errors import ValidationError
from grocery.core.database.base import generate_ulid
from grocery.features.stores.models import Store
from grocery.features.stores.schemas import StoreDefinition


class Interval(Protocol):
    left: int
    right: int


def is_descendant_or_self(origin: Interval, target: Interval) -> bool:
    """True when target lies inside origin's subtree (origin itself included)."""
    return target.left >= origin.left and target.right <= origin.right


def _parse_definition(definition: StoreDefinition | Mapping[str, Any]) -> StoreDefinition:
    if isinstance(definition, StoreDefinition):
        return definition
    try:
        return StoreDefinition.model_validate(definition)
    except PydanticValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in error['loc']) or 'root'}: {error['msg']}"
            for error in e.errors()
        ]
        raise ValidationError(
            f"Invalid store definition: {'; '.join(errors)}",
            meta={"errors": errors},
        ) from e


def encode(definition: StoreDefinition | Mapping[str, Any]) -> list[Store]:
    """
    Convert a nested {name, children} definition into Store nodes.

    Children keep the order they are given in. Nodes are returned in pre-order
    (parents before their children) with ids, parent ids and intervals set,
    ready for bulk insertion.

    Raises:
        ValidationError: if any node of the definition is malformed
    """
    root = _parse_definition(definition)
    counter: Iterator[int] = itertools.count(1)
    stores: list[Store] = []

    def visit(node: StoreDefinition, parent_id: str | None) -> Store:
        store = Store(id=generate_ulid(), name=node.name, parent_id=parent_id, left=next(counter))
        stores.append(store)
        for child in node.children:
            visit(child, store.id)
        store.right = next(counter)
        return store

    visit(root, None)
    return stores
