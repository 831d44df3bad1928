# services/config_engine/normalizer.py
"""
Turns a backend configuration document into one canonical ``ValueStore``.

Two document shapes are accepted:

* **flat map** – ``{"url": "...", "pageStart": 1}``; value types are
  inferred from the runtime shape of each value.
* **schema-annotated map** – ``{"properties": {"url": {"type": "string",
  "default": "..."}}}``; the type is explicit and the value is ``default``.

Normalization is the only place where the two shapes differ; nothing
downstream looks at where a store came from.
"""
from __future__ import annotations

import copy
from typing import Any, Dict, Mapping, Optional, Sequence

from loguru import logger

from models.field_schema import (
    FieldSchema,
    ValueType,
    coerce_value,
    empty_value,
    value_type_from_wire,
)

from .value_store import ValueStore


def infer_value_type(value: Any, field: Optional[FieldSchema] = None) -> ValueType:
    """
    Infer a value type from a plain value.

    ``url`` is only chosen when the matching schema field declares it.
    """
    if isinstance(value, bool):
        return ValueType.BOOLEAN
    if isinstance(value, (int, float)):
        return ValueType.INTEGER
    if isinstance(value, (list, tuple)):
        return ValueType.STRING_ARRAY
    if field is not None and field.value_type is ValueType.URL:
        return ValueType.URL
    return ValueType.STRING


def is_schema_annotated(document: Mapping[str, Any]) -> bool:
    return isinstance(document.get("properties"), Mapping)


def _conform(value: Any, value_type: ValueType, field: Optional[FieldSchema], key: str) -> Any:
    """
    Bring *value* to the declared type of its schema field when it can be
    done losslessly; otherwise keep it verbatim.
    """
    if field is None:
        return copy.deepcopy(value)
    if value_type is field.value_type or {value_type, field.value_type} <= {
        ValueType.STRING,
        ValueType.URL,
    }:
        return copy.deepcopy(value)
    try:
        return coerce_value(field.value_type, value)
    except ValueError:
        logger.warning(
            f"Value of '{key}' is {value_type.value}, schema declares "
            f"{field.value_type.value}; keeping it unchanged"
        )
        return copy.deepcopy(value)


def _from_properties(
    properties: Mapping[str, Any], by_name: Mapping[str, FieldSchema]
) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for key, prop in properties.items():
        field = by_name.get(key)
        prop = prop if isinstance(prop, Mapping) else {}
        if "type" in prop:
            declared = value_type_from_wire(prop["type"])
        elif field is not None:
            declared = field.value_type
        else:
            declared = ValueType.STRING

        if "default" in prop and prop["default"] is not None:
            values[key] = _conform(prop["default"], declared, field, key)
        elif field is not None:
            values[key] = field.default_value()
        else:
            values[key] = empty_value(declared)
    return values


def _from_flat(
    document: Mapping[str, Any], by_name: Mapping[str, FieldSchema]
) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for key, value in document.items():
        field = by_name.get(key)
        if value is None:
            values[key] = field.default_value() if field is not None else None
            continue
        values[key] = _conform(value, infer_value_type(value, field), field, key)
    return values


def normalize(
    document: Optional[Mapping[str, Any]],
    schema: Sequence[FieldSchema],
    overlay: Optional[Mapping[str, Any]] = None,
) -> ValueStore:
    """
    Build the canonical value store for *document* against *schema*.

    *overlay* is an externally supplied default set (see ``overlays.py``): it
    replaces schema defaults for keys the document does not carry.  Keys in
    the overlay without a schema entry are ignored.  Unknown document keys are
    preserved verbatim.
    """
    document = document or {}
    by_name = {f.name: f for f in schema}

    if is_schema_annotated(document):
        values = _from_properties(document["properties"], by_name)
        shape = "schema-annotated"
    else:
        values = _from_flat(document, by_name)
        shape = "flat"

    overlay = overlay or {}
    skipped = [k for k in overlay if k not in by_name]
    if skipped:
        logger.debug(f"Overlay keys without a schema field ignored: {skipped}")

    for field in schema:
        if field.name in values:
            continue
        if field.name in overlay:
            values[field.name] = _conform(
                overlay[field.name],
                infer_value_type(overlay[field.name], field),
                field,
                field.name,
            )
        else:
            values[field.name] = field.default_value()

    extras = [k for k in values if k not in by_name]
    logger.debug(
        f"Normalized {shape} document: {len(values)} value(s), "
        f"{len(extras)} without a schema field"
    )
    return ValueStore(values)
