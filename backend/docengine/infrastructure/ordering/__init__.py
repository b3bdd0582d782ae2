from .engine import (
    OrderingResult,
    assert_unique_keys,
    in_key_order,
    insert_after,
    move,
    remove,
    renumber,
    reorder,
)

__all__ = [
    "OrderingResult",
    "assert_unique_keys",
    "in_key_order",
    "insert_after",
    "move",
    "remove",
    "renumber",
    "reorder",
]
