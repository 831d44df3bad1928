# services/config_engine/schema_registry.py
"""
Fetches field schemas for templates/actors and caches them per identifier.

The registry is the only suspending step of an edit session.  A failed fetch
never blocks editing: ``load`` reports ``SchemaState.UNAVAILABLE`` with an
empty schema and the session falls back to raw-only editing.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping, Protocol, Sequence, Tuple

from loguru import logger
from pydantic import ValidationError

from core.exceptions import ConsoleException, SchemaUnavailableError
from models.field_schema import FieldSchema
from models.results import SchemaLoadResult, SchemaState


class SchemaFetcher(Protocol):
    """Anything that returns raw field descriptors for an identifier."""

    def fetch_schema(self, identifier: str) -> Sequence[Mapping[str, Any]]:
        ...


def parse_fields(identifier: str, descriptors: Sequence[Mapping[str, Any]]) -> Tuple[FieldSchema, ...]:
    """Validate raw descriptors; names must be unique."""
    if not isinstance(descriptors, (list, tuple)):
        raise SchemaUnavailableError(identifier, "field list is not a sequence")
    fields: List[FieldSchema] = []
    seen = set()
    for raw in descriptors:
        try:
            field = FieldSchema.model_validate(raw)
        except ValidationError as exc:
            raise SchemaUnavailableError(identifier, f"invalid field descriptor: {exc}") from exc
        if field.name in seen:
            raise SchemaUnavailableError(identifier, f"duplicate field '{field.name}'")
        seen.add(field.name)
        fields.append(field)
    return tuple(fields)


class SchemaRegistry:
    """Read-only, per-identifier cache in front of a ``SchemaFetcher``."""

    def __init__(self, fetcher: SchemaFetcher):
        self._fetcher = fetcher
        self._cache: Dict[str, Tuple[FieldSchema, ...]] = {}

    def load_schema(self, identifier: str) -> Tuple[FieldSchema, ...]:
        """
        Return the schema for *identifier*.

        Raises
        ------
        SchemaUnavailableError
            If the identifier is empty or the fetch/validation fails.
        """
        identifier = (identifier or "").strip()
        if not identifier:
            raise SchemaUnavailableError("", "identifier must be non-empty")

        if identifier in self._cache:
            logger.debug(f"Schema cache hit for {identifier}")
            return self._cache[identifier]

        try:
            descriptors = self._fetcher.fetch_schema(identifier)
        except SchemaUnavailableError:
            raise
        except ConsoleException as exc:
            raise SchemaUnavailableError(identifier, exc.message) from exc
        except Exception as exc:
            logger.exception(f"Unexpected error fetching schema for {identifier}")
            raise SchemaUnavailableError(identifier, f"{type(exc).__name__}: {exc}") from exc

        fields = parse_fields(identifier, descriptors)
        self._cache[identifier] = fields
        logger.info(f"Loaded schema for {identifier}: {len(fields)} field(s)")
        return fields

    def load(self, identifier: str) -> SchemaLoadResult:
        """Engine-facing variant of ``load_schema`` – never raises."""
        try:
            fields = self.load_schema(identifier)
        except SchemaUnavailableError as exc:
            logger.warning(f"{exc.message} – falling back to raw-only editing")
            return SchemaLoadResult(
                identifier=identifier or "",
                status=SchemaState.UNAVAILABLE,
                error=exc.message,
            )
        return SchemaLoadResult(identifier=identifier, status=SchemaState.READY, fields=fields)

    def is_cached(self, identifier: str) -> bool:
        return identifier in self._cache

    def clear(self) -> None:
        """Drop every cached schema (end of the editing session)."""
        self._cache.clear()
