"""Tests for order-key maintenance."""

from dataclasses import dataclass
from typing import Any, List

import pytest

from docengine.infrastructure.ordering import (
    assert_unique_keys,
    in_key_order,
    insert_after,
    move,
    remove,
    renumber,
    reorder,
)
from docengine.modules.common.exceptions import ValidationError


@dataclass
class Item:
    id: Any
    sort_order: int


def ids(items: List[Item]) -> List[Any]:
    return [item.id for item in items]


def keys(items: List[Item]) -> List[int]:
    return [item.sort_order for item in items]


@pytest.fixture
def dense() -> List[Item]:
    return [Item(id=i, sort_order=i) for i in range(5)]


class TestInsertAfter:
    """Test suite for inserting a sibling after an anchor."""

    def test_append_gets_last_plus_one(self, dense):
        result = insert_after(dense, 4, Item(id="new", sort_order=0))
        assert ids(result.items)[-1] == "new"
        assert result.items[-1].sort_order == 5
        assert result.changed_ids == ["new"]
        assert not result.renumbered

    def test_insert_into_gap_uses_midpoint(self):
        siblings = [Item(id="a", sort_order=0), Item(id="b", sort_order=10)]
        result = insert_after(siblings, 0, Item(id="new", sort_order=0))
        assert ids(result.items) == ["a", "new", "b"]
        assert result.items[1].sort_order == 5
        assert result.changed_ids == ["new"]

    def test_insert_at_front_with_room(self):
        siblings = [Item(id="a", sort_order=4)]
        result = insert_after(siblings, -1, Item(id="new", sort_order=0))
        assert ids(result.items) == ["new", "a"]
        assert result.items[0].sort_order < 4

    def test_no_gap_renumbers_whole_set(self, dense):
        result = insert_after(dense, 1, Item(id="new", sort_order=0))
        assert ids(result.items) == [0, 1, "new", 2, 3, 4]
        assert keys(result.items) == [0, 1, 2, 3, 4, 5]
        assert result.renumbered
        assert set(result.changed_ids) == {"new", 2, 3, 4}

    def test_item_without_id_is_not_reported(self, dense):
        result = insert_after(dense, 0, Item(id=None, sort_order=0))
        assert None not in result.changed_ids
        assert keys(result.items) == [0, 1, 2, 3, 4, 5]

    def test_empty_set(self):
        result = insert_after([], -1, Item(id="only", sort_order=7))
        assert keys(result.items) == [0]

    @pytest.mark.parametrize("anchor", [-2, 5])
    def test_anchor_out_of_range(self, dense, anchor):
        with pytest.raises(ValidationError):
            insert_after(dense, anchor, Item(id="new", sort_order=0))

    def test_input_sequence_is_not_mutated(self, dense):
        insert_after(dense, 4, Item(id="new", sort_order=0))
        assert len(dense) == 5


class TestMove:
    """Test suite for moving a sibling."""

    def test_move_first_to_fourth(self, dense):
        result = move(dense, 0, 3)
        assert ids(result.items) == [1, 2, 3, 0, 4]
        assert keys(result.items) == [0, 1, 2, 3, 4]
        assert set(result.changed_ids) == {0, 1, 2, 3}

    def test_move_backwards(self, dense):
        result = move(dense, 4, 1)
        assert ids(result.items) == [0, 4, 1, 2, 3]
        assert keys(result.items) == [0, 1, 2, 3, 4]

    def test_same_index_changes_nothing(self, dense):
        result = move(dense, 2, 2)
        assert ids(result.items) == [0, 1, 2, 3, 4]
        assert result.changed_ids == []

    @pytest.mark.parametrize("from_index,to_index", [(-1, 0), (0, 5), (5, 0)])
    def test_out_of_range(self, dense, from_index, to_index):
        with pytest.raises(ValidationError):
            move(dense, from_index, to_index)


class TestRemoveAndReorder:
    def test_remove_keeps_remaining_keys(self, dense):
        result = remove(dense, 2)
        assert ids(result.items) == [0, 1, 3, 4]
        assert keys(result.items) == [0, 1, 3, 4]
        assert result.changed_ids == []

    def test_remove_out_of_range(self, dense):
        with pytest.raises(ValidationError):
            remove(dense, 5)

    def test_reorder_full_permutation(self, dense):
        result = reorder(dense, [4, 3, 2, 1, 0])
        assert ids(result.items) == [4, 3, 2, 1, 0]
        assert keys(result.items) == [0, 1, 2, 3, 4]

    @pytest.mark.parametrize("ordered", [[0, 1, 2, 3], [0, 1, 2, 3, 4, 5], [0, 0, 1, 2, 3], [0, 1, 2, 3, 9]])
    def test_reorder_rejects_non_permutation(self, dense, ordered):
        with pytest.raises(ValidationError):
            reorder(dense, ordered)
        assert keys(dense) == [0, 1, 2, 3, 4]


class TestKeyHelpers:
    def test_in_key_order(self):
        items = [Item(id="b", sort_order=3), Item(id="a", sort_order=-1), Item(id="c", sort_order=8)]
        assert ids(in_key_order(items)) == ["a", "b", "c"]

    def test_renumber_densifies(self):
        items = [Item(id="a", sort_order=-1), Item(id="b", sort_order=5), Item(id="c", sort_order=2)]
        result = renumber(items)
        assert keys(result.items) == [0, 1, 2]
        assert result.changed_ids == ["a", "b"]

    def test_duplicate_keys_detected(self):
        with pytest.raises(ValidationError):
            assert_unique_keys([Item(id=1, sort_order=0), Item(id=2, sort_order=0)])

    def test_keys_stay_unique_across_operations(self, dense):
        items = dense
        items = insert_after(items, 0, Item(id="x", sort_order=0)).items
        items = insert_after(items, -1, Item(id="y", sort_order=0)).items
        items = move(items, 6, 0).items
        items = remove(items, 3).items
        items = insert_after(items, len(items) - 1, Item(id="z", sort_order=0)).items
        assert_unique_keys(items)
        assert ids(in_key_order(items)) == ids(items)
