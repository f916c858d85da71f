import pytest

from grocery.core.errors import ValidationError
from grocery.features.stores.schemas import StoreDefinition
from grocery.features.stores.tree import encode, is_descendant_or_self
from scripts.seed_stores import STORE_TREE


SCENARIO_TREE = {
    "name": "Root",
    "children": [
        {"name": "A", "children": [{"name": "B", "children": [{"name": "C"}]}, {"name": "D"}]},
        {"name": "E", "children": [{"name": "F"}]},
    ],
}


def _by_name(stores):
    return {store.name: store for store in stores}


def _children(stores, parent):
    return [store for store in stores if store.parent_id == parent.id]


def test_scenario_intervals():
    stores = _by_name(encode(SCENARIO_TREE))
    intervals = {name: (store.left, store.right) for name, store in stores.items()}
    assert intervals == {
        "Root": (1, 14),
        "A": (2, 9),
        "B": (3, 6),
        "C": (4, 5),
        "D": (7, 8),
        "E": (10, 13),
        "F": (11, 12),
    }


def test_nodes_are_returned_parents_first():
    stores = encode(SCENARIO_TREE)
    assert [store.name for store in stores] == ["Root", "A", "B", "C", "D", "E", "F"]
    assert stores[0].parent_id is None
    seen = set()
    for store in stores:
        assert store.parent_id is None or store.parent_id in seen
        seen.add(store.id)


def test_parent_ids_follow_definition():
    stores = _by_name(encode(SCENARIO_TREE))
    assert stores["A"].parent_id == stores["Root"].id
    assert stores["C"].parent_id == stores["B"].id
    assert stores["F"].parent_id == stores["E"].id


def test_single_root():
    (store,) = encode({"name": "Solo"})
    assert (store.left, store.right) == (1, 2)
    assert store.parent_id is None
    assert store.id


def test_accepts_parsed_definition():
    definition = StoreDefinition(name="Root", children=[StoreDefinition(name="Child")])
    stores = encode(definition)
    assert [(s.name, s.left, s.right) for s in stores] == [("Root", 1, 4), ("Child", 2, 3)]


def test_ids_are_unique():
    stores = encode(STORE_TREE)
    assert len({store.id for store in stores}) == len(stores)


@pytest.mark.parametrize("definition", [
    {"children": []},
    {"name": ""},
    {"name": "   "},
    {"name": "Root", "children": [{"children": []}]},
    {"name": "Root", "children": "nope"},
    {"name": "Root", "parent": "x"},
])
def test_malformed_definition(definition):
    with pytest.raises(ValidationError) as exc_info:
        encode(definition)
    assert exc_info.value.status_code == 400
    assert exc_info.value.meta["errors"]


@pytest.mark.parametrize("definition", [SCENARIO_TREE, STORE_TREE])
def test_interval_properties(definition):
    stores = encode(definition)

    # one counter, two ticks per node
    ticks = sorted([s.left for s in stores] + [s.right for s in stores])
    assert ticks == list(range(1, 2 * len(stores) + 1))

    for store in stores:
        assert store.right > store.left
        children = _children(stores, store)
        if not children:
            assert store.right == store.left + 1
        for child in children:
            assert store.left < child.left
            assert store.right > child.right


@pytest.mark.parametrize("definition", [SCENARIO_TREE, STORE_TREE])
def test_siblings_do_not_overlap(definition):
    stores = encode(definition)
    for parent in stores:
        children = _children(stores, parent)
        for i, first in enumerate(children):
            for second in children[i + 1:]:
                assert first.right < second.left or second.right < first.left
                assert not is_descendant_or_self(first, second)
                assert not is_descendant_or_self(second, first)


def test_siblings_keep_definition_order():
    stores = _by_name(encode(SCENARIO_TREE))
    assert stores["B"].left < stores["D"].left
    assert stores["A"].right < stores["E"].left


def test_descendant_or_self_scenario():
    stores = _by_name(encode(SCENARIO_TREE))
    assert not is_descendant_or_self(stores["A"], stores["E"])
    assert is_descendant_or_self(stores["Root"], stores["F"])
    assert is_descendant_or_self(stores["A"], stores["C"])
    assert not is_descendant_or_self(stores["C"], stores["A"])
    assert not is_descendant_or_self(stores["B"], stores["D"])


def test_descendant_or_self_matches_ancestry():
    stores = encode(STORE_TREE)
    by_id = {store.id: store for store in stores}

    def ancestors_or_self(store):
        while store is not None:
            yield store
            store = by_id.get(store.parent_id)

    for target in stores:
        expected = {store.id for store in ancestors_or_self(target)}
        for origin in stores:
            assert is_descendant_or_self(origin, target) == (origin.id in expected)
