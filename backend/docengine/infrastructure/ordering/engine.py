"""Order-key maintenance for sibling sets.

Used for blocks within a page and for pages within one parent. Items are any
objects exposing ``id`` and a mutable integer ``sort_order``. Every
operation returns the new display order together with the ids whose key
changed, so callers issue only the writes they need.
"""

from dataclasses import dataclass, field
from typing import Any, Generic, Iterable, List, Protocol, Sequence, TypeVar

from ...modules.common.exceptions import ValidationError

# Lower bound used when inserting in front of the first sibling.
LOWER_SENTINEL = -1


class Ordered(Protocol):
    id: Any
    sort_order: int


T = TypeVar("T", bound=Ordered)


@dataclass
class OrderingResult(Generic[T]):
    """Outcome of an ordering operation.

    Attributes:
        items: Siblings in their new display order
        changed_ids: Ids of items whose ``sort_order`` was assigned or changed
            (items without an id yet are left out)
        renumbered: True when the whole set was renumbered densely
    """

    items: List[T]
    changed_ids: List[Any] = field(default_factory=list)
    renumbered: bool = False


def in_key_order(siblings: Iterable[T]) -> List[T]:
    """Return siblings sorted by ascending order key."""
    return sorted(siblings, key=lambda item: item.sort_order)


def assert_unique_keys(siblings: Iterable[Ordered]) -> None:
    """Raise ``ValidationError`` if two siblings share an order key."""
    seen = set()
    for item in siblings:
        if item.sort_order in seen:
            raise ValidationError(f"Duplicate order key {item.sort_order} in sibling set")
        seen.add(item.sort_order)


def renumber(siblings: Sequence[T]) -> OrderingResult[T]:
    """Assign dense keys ``0..n-1`` following the given sequence order."""
    items = list(siblings)
    changed = []
    for position, item in enumerate(items):
        if item.sort_order != position:
            item.sort_order = position
            if item.id is not None:
                changed.append(item.id)
    return OrderingResult(items=items, changed_ids=changed, renumbered=True)


def _check_index(index: int, size: int, name: str) -> None:
    if index < 0 or index >= size:
        raise ValidationError(f"{name} {index} is out of range for {size} siblings")


def insert_after(siblings: Sequence[T], anchor_index: int, new_item: T) -> OrderingResult[T]:
    """Insert ``new_item`` directly after the sibling at ``anchor_index``.

    The new key lies strictly between the neighbours' keys, with -1 as the
    lower bound at the front; an item appended past the end gets ``last + 1``.
    When no integer fits between the neighbours, the whole set, new item
    included, is renumbered densely.

    Args:
        siblings: Current siblings in display order
        anchor_index: Index to insert after, or -1 to insert at the front
        new_item: Item to insert; its ``sort_order`` is overwritten

    Raises:
        ValidationError: If anchor_index is outside ``-1..len(siblings)-1``
    """
    items = list(siblings)
    if anchor_index < -1 or anchor_index >= len(items):
        raise ValidationError(f"Anchor index {anchor_index} is out of range for {len(items)} siblings")

    lower = items[anchor_index].sort_order if anchor_index >= 0 else LOWER_SENTINEL
    upper = items[anchor_index + 1].sort_order if anchor_index + 1 < len(items) else None

    items.insert(anchor_index + 1, new_item)

    if upper is None:
        new_item.sort_order = lower + 1
    elif upper - lower > 1:
        new_item.sort_order = (lower + upper) // 2
    else:
        new_item.sort_order = LOWER_SENTINEL
        return renumber(items)

    changed = [new_item.id] if new_item.id is not None else []
    return OrderingResult(items=items, changed_ids=changed, renumbered=False)


def move(siblings: Sequence[T], from_index: int, to_index: int) -> OrderingResult[T]:
    """Move one sibling and renumber the set densely.

    Items outside the moved range keep their relative order.

    Raises:
        ValidationError: If either index is out of range
    """
    items = list(siblings)
    _check_index(from_index, len(items), "Source index")
    _check_index(to_index, len(items), "Target index")

    item = items.pop(from_index)
    items.insert(to_index, item)
    return renumber(items)


def remove(siblings: Sequence[T], index: int) -> OrderingResult[T]:
    """Drop the sibling at ``index``; remaining keys stay as they are."""
    items = list(siblings)
    _check_index(index, len(items), "Index")
    items.pop(index)
    return OrderingResult(items=items, changed_ids=[], renumbered=False)


def reorder(siblings: Sequence[T], ordered_ids: Sequence[Any]) -> OrderingResult[T]:
    """Apply a complete new order given as a list of ids.

    Raises:
        ValidationError: If ``ordered_ids`` is not an exact permutation of
            the sibling ids; nothing is changed in that case
    """
    by_id = {item.id: item for item in siblings}
    if len(ordered_ids) != len(by_id) or set(ordered_ids) != set(by_id):
        raise ValidationError("Order must list every sibling id exactly once")
    return renumber([by_id[item_id] for item_id in ordered_ids])
