# services/config_engine/value_store.py
"""
Structured, typed in-memory configuration keyed by field name.

The store is the single source of truth while the operator edits in
structured mode.  It is never persisted directly – only the submission
builder's payload reaches the backend.
"""
from __future__ import annotations

import copy
from typing import Any, Dict, Iterator, List, Mapping, Optional, Sequence, Tuple

from models.field_schema import FieldSchema


class ValueStore:
    """Mapping of field name → value with whole-store and per-key mutation."""

    def __init__(self, values: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, Any] = copy.deepcopy(dict(values or {}))

    # ------------------------------------------------------------------
    # Mapping protocol
    # ------------------------------------------------------------------
    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __contains__(self, name: object) -> bool:
        return name in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, ValueStore):
            return self._values == other._values
        if isinstance(other, Mapping):
            return self._values == dict(other)
        return NotImplemented

    def __repr__(self) -> str:
        return f"ValueStore({self._values!r})"

    def get(self, name: str, default: Any = None) -> Any:
        return self._values.get(name, default)

    def keys(self):
        return self._values.keys()

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------
    def set(self, name: str, value: Any) -> None:
        """Structured-mode edit: exactly one key changes."""
        self._values[name] = value

    def replace(self, values: Mapping[str, Any]) -> None:
        """Raw-mode parse: the whole store is swapped, no field-level merge."""
        self._values = copy.deepcopy(dict(values))

    def clear(self) -> None:
        self._values = {}

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------
    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self._values)

    def ordered_items(self, schema: Sequence[FieldSchema]) -> List[Tuple[str, Any]]:
        """Schema declaration order first, then any extra keys in insertion order."""
        declared = [f.name for f in schema]
        items = [(name, self._values[name]) for name in declared if name in self._values]
        items.extend((k, v) for k, v in self._values.items() if k not in declared)
        return items

    def extra_keys(self, schema: Sequence[FieldSchema]) -> List[str]:
        """Keys with no FieldSchema entry – kept verbatim but never rendered."""
        declared = {f.name for f in schema}
        return [k for k in self._values if k not in declared]
