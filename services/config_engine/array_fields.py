# services/config_engine/array_fields.py
"""
Helpers for ``stringArray`` fields.

Two editing surfaces operate on the same sequence: comma-separated text and a
discrete list (add / remove / set).  All helpers return a new list and never
reorder the elements they keep.
"""
from typing import List, Sequence

from models.field_schema import split_comma_text

__all__ = ["split_comma_text", "join_comma_text", "add_item", "remove_at", "set_at"]


def join_comma_text(items: Sequence[str]) -> str:
    """Render a sequence for the comma-separated surface."""
    return ", ".join(items)


def add_item(items: Sequence[str], value: str = "") -> List[str]:
    """Append one element (empty by default) at the end."""
    return [*items, value]


def _check_index(items: Sequence[str], index: int) -> None:
    # negative indexes are rejected – the list surface only emits 0..n-1
    if index < 0 or index >= len(items):
        raise IndexError(f"Index {index} out of range for {len(items)} item(s)")


def remove_at(items: Sequence[str], index: int) -> List[str]:
    """Delete exactly the element at *index*; the rest keep their order."""
    _check_index(items, index)
    return [item for i, item in enumerate(items) if i != index]


def set_at(items: Sequence[str], index: int, value: str) -> List[str]:
    """Replace the element at *index* in place."""
    _check_index(items, index)
    updated = list(items)
    updated[index] = value
    return updated
