# services/config_engine/text_mirror.py
"""
Serialized (JSON) mirror of the value store used for raw editing.

``serialize`` is deterministic: two-space indentation, keys in schema
declaration order followed by any extra keys.  ``parse`` accepts only a JSON
object; anything else is a ``ParseFailed`` result and the caller keeps its
last good store.
"""
from __future__ import annotations

import json
from typing import Any, Dict, Mapping, Sequence

from loguru import logger

from core.exceptions import ParseFailedError
from models.field_schema import FieldSchema
from models.results import ParseResult

from .value_store import ValueStore


def serialize(values: Mapping[str, Any], schema: Sequence[FieldSchema] = ()) -> str:
    store = values if isinstance(values, ValueStore) else ValueStore(values)
    ordered = dict(store.ordered_items(schema))
    return json.dumps(ordered, indent=2, ensure_ascii=False)


def _parse_object(text: str) -> Dict[str, Any]:
    try:
        parsed = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ParseFailedError(
            f"Invalid JSON at line {exc.lineno}, column {exc.colno}: {exc.msg}"
        ) from exc
    if not isinstance(parsed, dict):
        raise ParseFailedError(
            f"Configuration must be a JSON object, got {type(parsed).__name__}"
        )
    return parsed


def parse(text: str) -> ParseResult:
    """Parse raw text into a configuration mapping (never raises)."""
    try:
        return ParseResult.success(_parse_object(text))
    except ParseFailedError as exc:
        return ParseResult.failure(exc.message)


class TextMirror:
    """Holds the raw document while the operator types into it."""

    def __init__(self, text: str = ""):
        self.text = text

    def refresh(self, store: ValueStore, schema: Sequence[FieldSchema]) -> str:
        """Re-derive the text from the store (structured → raw)."""
        self.text = serialize(store, schema)
        return self.text

    def update(self, text: str) -> ParseResult:
        """Record a keystroke and try to parse the new text."""
        self.text = text
        result = parse(text)
        if not result.ok:
            logger.debug(f"Raw configuration does not parse yet: {result.error}")
        return result

    def clear(self) -> None:
        self.text = ""
