# services/config_engine/reference_resolver.py
"""
Resolves the linked actor reference to a canonical identifier.

Priority:

1. embedded object → its ``id``/``_id`` (never its name)
2. identifier-shaped string → unchanged
3. legacy display name listed in the allow-list → mapped identifier
4. anything else → unchanged, flagged ``unverified``
"""
from __future__ import annotations

import re
from typing import Any, Mapping, Optional, Union

from loguru import logger

from models.actor_reference import (
    ActorReference,
    EmbeddedReference,
    Identifier,
    LegacyName,
    ResolvedReference,
)

DEFAULT_ID_PATTERN = re.compile(r"^[0-9a-fA-F]{24}$")

PatternLike = Union[str, "re.Pattern[str]"]


def _compile(pattern: Optional[PatternLike]) -> "re.Pattern[str]":
    if pattern is None:
        return DEFAULT_ID_PATTERN
    return re.compile(pattern) if isinstance(pattern, str) else pattern


def classify_reference(raw: Any, id_pattern: Optional[PatternLike] = None) -> Optional[ActorReference]:
    """Turn a raw backend/operator value into the tagged union (``None`` if empty)."""
    if raw is None:
        return None
    if isinstance(raw, ResolvedReference):
        raw = raw.actor_id
    if isinstance(raw, (list, tuple)):
        # list-valued references come from populated joins – the first entry wins
        return classify_reference(raw[0], id_pattern) if raw else None
    if isinstance(raw, Mapping):
        ref_id = raw.get("id") or raw.get("_id")
        name = raw.get("name")
        if ref_id:
            return EmbeddedReference(id=str(ref_id), name=name)
        if isinstance(name, str) and name.strip():
            return LegacyName(name=name.strip())
        return None

    text = str(raw).strip()
    if not text:
        return None
    if _compile(id_pattern).match(text):
        return Identifier(value=text)
    return LegacyName(name=text)


def resolve_actor_reference(
    raw: Any,
    legacy_name_to_id: Optional[Mapping[str, str]] = None,
    id_pattern: Optional[PatternLike] = None,
) -> ResolvedReference:
    """Resolve *raw* once at the boundary; see the module docstring for the rules."""
    ref = classify_reference(raw, id_pattern)
    table = legacy_name_to_id or {}

    if ref is None:
        logger.warning("Actor reference is empty")
        return ResolvedReference(actor_id="", unverified=True)

    if isinstance(ref, EmbeddedReference):
        return ResolvedReference(actor_id=ref.id, display_name=ref.name)

    if isinstance(ref, Identifier):
        return ResolvedReference(actor_id=ref.value)

    mapped = table.get(ref.name)
    if mapped:
        logger.debug(f"Legacy actor name '{ref.name}' mapped to {mapped}")
        return ResolvedReference(actor_id=mapped, display_name=ref.name)

    logger.warning(f"Actor reference '{ref.name}' is not a known identifier or legacy name")
    return ResolvedReference(actor_id=ref.name, display_name=ref.name, unverified=True)


def campaign_actor_reference(document: Mapping[str, Any]) -> Any:
    """
    Pick the raw actor reference of a campaign record.

    ``actorIdOriginal`` (kept by the backend when ``actorId`` was populated)
    takes priority over ``actorId``.
    """
    original = document.get("actorIdOriginal")
    if original:
        return original
    return document.get("actorId")
