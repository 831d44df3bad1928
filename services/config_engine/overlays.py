# services/config_engine/overlays.py
"""
Loads the overlay table from ``configs/overlays.yaml`` and validates it with
Pydantic models.

The file holds two explicit, externally maintained tables:

* ``overlays`` – per-actor default sets applied once when a configuration is
  opened (see ``normalizer.normalize``).
* ``legacy_actor_names`` – the allow-list used by the reference resolver to
  translate old display-name references into identifiers.

Public API:
* ``load_overlay_table(path)`` – validated ``OverlayTable`` (cached per path).
* ``get_overlay(actor_id, path)`` – the value set for one actor (``{}`` if none).
* ``legacy_actor_table(path)`` – name → identifier mapping.
"""
from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger
from pydantic import BaseModel, Field, ValidationError, field_validator

from core.config import get_settings
from core.exceptions import OverlayConfigError


# ----------------------------------------------------------------------
# Pydantic schemas
# ----------------------------------------------------------------------
class ActorOverlay(BaseModel):
    """Default set for one actor."""
    label: Optional[str] = None
    values: Dict[str, Any] = Field(default_factory=dict)


class OverlayTable(BaseModel):
    """Top-level container of ``overlays.yaml``."""
    overlays: Dict[str, ActorOverlay] = Field(default_factory=dict)
    legacy_actor_names: Dict[str, str] = Field(default_factory=dict)

    @field_validator("legacy_actor_names")
    @classmethod
    def _ids_are_canonical(cls, table: Dict[str, str]) -> Dict[str, str]:
        pattern = re.compile(get_settings().ACTOR_ID_PATTERN)
        bad = [name for name, actor_id in table.items() if not pattern.match(actor_id)]
        if bad:
            raise ValueError(f"Legacy names mapped to non-identifier values: {bad}")
        return table


# ----------------------------------------------------------------------
# Loading & caching
# ----------------------------------------------------------------------
_cache: Dict[Path, OverlayTable] = {}


def _resolve_path(path: Optional[Path]) -> Path:
    return Path(path) if path is not None else Path(get_settings().OVERLAYS_PATH)


def _load_yaml(path: Path) -> dict:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh) or {}
    except FileNotFoundError as exc:
        raise OverlayConfigError(f"Overlay file not found: {path}") from exc
    except yaml.YAMLError as exc:
        raise OverlayConfigError(f"Overlay file {path} is not valid YAML: {exc}") from exc
    if not isinstance(raw, dict):
        raise OverlayConfigError(f"Overlay file {path} must contain a mapping")
    return raw


def load_overlay_table(path: Optional[Path] = None) -> OverlayTable:
    """
    Parse and validate the overlay file, caching the result per path.

    Raises
    ------
    OverlayConfigError
        If the file is missing, unreadable or does not match ``OverlayTable``.
    """
    resolved = _resolve_path(path).resolve()
    if resolved not in _cache:
        raw = _load_yaml(resolved)
        try:
            _cache[resolved] = OverlayTable(**raw)
        except ValidationError as exc:
            raise OverlayConfigError(f"Overlay file {resolved} is invalid: {exc}") from exc
        logger.info(
            f"Loaded {len(_cache[resolved].overlays)} overlay(s) and "
            f"{len(_cache[resolved].legacy_actor_names)} legacy actor name(s) from {resolved}"
        )
    return _cache[resolved]


def clear_cache() -> None:
    _cache.clear()


def get_overlay(actor_id: str, path: Optional[Path] = None) -> Dict[str, Any]:
    """Return a copy of the default set for *actor_id* (empty when none)."""
    entry = load_overlay_table(path).overlays.get(actor_id)
    return dict(entry.values) if entry else {}


def legacy_actor_table(path: Optional[Path] = None) -> Dict[str, str]:
    return dict(load_overlay_table(path).legacy_actor_names)
