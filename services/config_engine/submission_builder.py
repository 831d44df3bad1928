# services/config_engine/submission_builder.py
"""
Assembles the document handed to the persistence backend.

Payload layout::

    {
      "name": ..., "description": ..., "website": ..., "urlPattern": ...,
      "category": ..., "isPublic": ..., "tags": [...], "actorType": ...,
      "actorId": "<resolved identifier>",
      "input": {<every schema field, declaration order>, <extra keys>}
    }

Metadata keys are only present when metadata is supplied.  Schema metadata
(labels, descriptions) is never re-embedded – only values.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Sequence

from loguru import logger

from models.field_schema import FieldSchema, ValueType, coerce_value, empty_value
from models.results import BuildResult
from models.template_metadata import REQUIRED_METADATA, TemplateMetadata

from .reference_resolver import PatternLike, resolve_actor_reference

ACTOR_KEY = "actorId"
INPUT_KEY = "input"

_URL_SCHEMES = ("http://", "https://")


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple)):
        return len(value) == 0
    return False


def _field_value(field: FieldSchema, values: Mapping[str, Any]) -> Any:
    if field.name not in values or values[field.name] is None:
        return empty_value(field.value_type)
    value = values[field.name]
    try:
        return coerce_value(field.value_type, value)
    except ValueError:
        # left as-is; the range/type checks below report it
        return value


def _check_field(field: FieldSchema, value: Any) -> bool:
    """True when *value* is acceptable for *field*."""
    if field.required and _is_empty(value):
        return False
    if field.value_type is ValueType.URL and isinstance(value, str) and value.strip():
        if not value.strip().startswith(_URL_SCHEMES):
            return False
    if field.value_type is ValueType.INTEGER:
        if not isinstance(value, int) or isinstance(value, bool):
            return False
        if field.min is not None and value < field.min:
            return False
        if field.max is not None and value > field.max:
            return False
    return True


def build_payload(
    values: Mapping[str, Any],
    schema: Sequence[FieldSchema],
    actor_reference: Any = None,
    metadata: Optional[TemplateMetadata] = None,
    legacy_names: Optional[Mapping[str, str]] = None,
    id_pattern: Optional[PatternLike] = None,
) -> BuildResult:
    """
    Build the outbound document.

    Every declared field is present (absent values become the type's empty
    value).  Returns ``BuildResult(ok=False, fields=[...])`` instead of a
    payload when required fields are empty or values are out of range.
    """
    failed: List[str] = []
    config: Dict[str, Any] = {}

    for field in schema:
        value = _field_value(field, values)
        if not _check_field(field, value):
            failed.append(field.name)
        config[field.name] = value

    declared = {f.name for f in schema}
    for key in values:
        if key not in declared:
            config[key] = values[key]

    payload: Dict[str, Any] = {}
    if metadata is not None:
        website = metadata.effective_website(config.get("url"))
        payload.update(metadata.to_document())
        payload["website"] = website
        payload["urlPattern"] = metadata.effective_url_pattern(website)
        for key in REQUIRED_METADATA:
            if _is_empty(payload.get(key)):
                failed.append(key)
        if actor_reference is None:
            actor_reference = metadata.actor_reference

    resolved = resolve_actor_reference(actor_reference, legacy_names, id_pattern)
    if metadata is not None and resolved.is_empty:
        failed.append("actorReference")

    if failed:
        logger.info(f"Payload rejected, invalid field(s): {failed}")
        return BuildResult(ok=False, fields=failed, unverified_reference=resolved.unverified)

    payload[ACTOR_KEY] = resolved.actor_id
    payload[INPUT_KEY] = config
    if resolved.unverified:
        logger.warning(f"Submitting unverified actor reference '{resolved.actor_id}'")
    return BuildResult(ok=True, payload=payload, unverified_reference=resolved.unverified)
