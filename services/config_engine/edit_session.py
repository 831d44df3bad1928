# services/config_engine/edit_session.py
"""
One edit session of a template/campaign configuration.

Ties the engine together: schema registry → normalizer → value store ↔ text
mirror → reference resolver → submission builder → persistence collaborator.

Modes are ``structured`` (per-field edits, lazy serialization) and ``raw``
(the operator types JSON; every successful parse replaces the store).  While
the schema is loading, or when it is unavailable, only raw mode is usable.
The backend is reached only from ``save`` – once per call, never implicitly.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from loguru import logger

from core.exceptions import ConsoleException
from models.actor_reference import ResolvedReference
from models.field_schema import FieldSchema, ValueType, coerce_value
from models.results import (
    BuildResult,
    ParseResult,
    SchemaLoadResult,
    SchemaState,
    SubmissionOutcome,
)
from models.template_metadata import TemplateMetadata

from . import array_fields
from .normalizer import normalize
from .reference_resolver import (
    PatternLike,
    campaign_actor_reference,
    resolve_actor_reference,
)
from .schema_registry import SchemaRegistry
from .submission_builder import build_payload
from .text_mirror import TextMirror, parse
from .value_store import ValueStore


class EditMode(str, Enum):
    STRUCTURED = "structured"
    RAW = "raw"


class ScopedEffect(Protocol):
    """UI side effect held for the lifetime of a session (e.g. scroll lock)."""

    def acquire(self) -> None:
        ...

    def release(self) -> None:
        ...


class Persistence(Protocol):
    def save_template(
        self, payload: Mapping[str, Any], template_id: Optional[str] = None
    ) -> Dict[str, Any]:
        ...


OverlaySource = Callable[[str], Mapping[str, Any]]


def _config_document(document: Mapping[str, Any]) -> Mapping[str, Any]:
    """Configuration part of a record: ``input_schema`` (annotated) or ``input`` (flat)."""
    annotated = document.get("input_schema")
    if isinstance(annotated, Mapping) and isinstance(annotated.get("properties"), Mapping):
        return annotated
    config = document.get("input")
    return config if isinstance(config, Mapping) else {}


class EditSession:
    """Engine façade used by the template and campaign editors."""

    def __init__(
        self,
        registry: SchemaRegistry,
        persistence: Optional[Persistence] = None,
        overlays: Optional[OverlaySource] = None,
        legacy_names: Optional[Mapping[str, str]] = None,
        effects: Sequence[ScopedEffect] = (),
        id_pattern: Optional[PatternLike] = None,
    ):
        self.registry = registry
        self.persistence = persistence
        self.overlays = overlays
        self.legacy_names = dict(legacy_names or {})
        self.effects = list(effects)
        self.id_pattern = id_pattern

        self.schema: Tuple[FieldSchema, ...] = ()
        self.schema_state = SchemaState.LOADING
        self.mode = EditMode.STRUCTURED
        self.store = ValueStore()
        self.mirror = TextMirror()
        self.metadata = TemplateMetadata()
        self.actor = ResolvedReference()
        self.record_id: Optional[str] = None
        self.is_open = False
        self._effects_held = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def _acquire_effects(self) -> None:
        if self._effects_held:
            return
        for effect in self.effects:
            effect.acquire()
        self._effects_held = True

    def _release_effects(self) -> None:
        if not self._effects_held:
            return
        for effect in reversed(self.effects):
            effect.release()
        self._effects_held = False

    def _discard(self) -> None:
        self.store.clear()
        self.mirror.clear()
        # schemas are cached for one editing session only
        self.registry.clear()
        self.is_open = False
        self._release_effects()

    def _overlay_for(self, actor_id: str) -> Mapping[str, Any]:
        if self.overlays is None:
            return {}
        try:
            return self.overlays(actor_id) or {}
        except ConsoleException as exc:
            logger.warning(f"Overlay defaults unavailable for {actor_id}: {exc.message}")
            return {}

    def open(self, actor_id: str, document: Optional[Mapping[str, Any]] = None) -> SchemaLoadResult:
        """
        Start editing a configuration for *actor_id*.

        *document* is the stored template/campaign when editing an existing
        record; ``None`` creates a new one.  Returns the schema load outcome –
        on ``unavailable`` the session opens in raw mode with an empty schema.
        """
        self._acquire_effects()
        self.is_open = True
        self.schema_state = SchemaState.LOADING
        self.schema = ()

        result = self.registry.load(actor_id)
        self.schema = result.fields
        self.schema_state = result.status

        document = document or {}
        overlay = self._overlay_for(actor_id) if result.ok else {}
        self.store = normalize(_config_document(document), self.schema, overlay)
        self.metadata = TemplateMetadata.from_document(document)

        raw_reference = campaign_actor_reference(document) or actor_id
        self.actor = resolve_actor_reference(raw_reference, self.legacy_names, self.id_pattern)
        self.metadata.actor_reference = self.actor.actor_id

        record_id = document.get("id") or document.get("_id")
        self.record_id = str(record_id) if record_id else None

        if result.ok:
            self.mode = EditMode.STRUCTURED
            self.mirror.clear()
        else:
            self.mode = EditMode.RAW
            self.mirror.refresh(self.store, self.schema)

        logger.info(
            f"Opened {'existing' if self.record_id else 'new'} configuration for actor "
            f"{self.actor.actor_id or actor_id} ({self.schema_state.value}, {self.mode.value} mode)"
        )
        return result

    def cancel(self) -> None:
        """Abandon the session – nothing is submitted."""
        if self.is_open:
            logger.debug("Edit session cancelled; discarding values")
        self._discard()

    def __enter__(self) -> "EditSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.is_open:
            self.cancel()

    # ------------------------------------------------------------------
    # Structured editing
    # ------------------------------------------------------------------
    @property
    def structured_enabled(self) -> bool:
        return self.is_open and self.schema_state is SchemaState.READY

    def field(self, name: str) -> Optional[FieldSchema]:
        return next((f for f in self.schema if f.name == name), None)

    def widget_fields(self) -> List[FieldSchema]:
        """Fields to render; keys kept without a schema entry are excluded."""
        return list(self.schema) if self.structured_enabled else []

    def _editable(self, name: str, value_type: Optional[ValueType] = None) -> Tuple[Optional[FieldSchema], Optional[ParseResult]]:
        if not self.structured_enabled:
            return None, ParseResult.failure("Structured editing is unavailable", field=name)
        if self.mode is not EditMode.STRUCTURED:
            return None, ParseResult.failure("Session is in raw mode", field=name)
        field = self.field(name)
        if field is None:
            return None, ParseResult.failure(f"Unknown field '{name}'", field=name)
        if value_type is not None and field.value_type is not value_type:
            return None, ParseResult.failure(
                f"Field '{name}' is not a {value_type.value} field", field=name
            )
        return field, None

    def edit_field(self, name: str, raw: Any) -> ParseResult:
        """Coerce *raw* to the field's type and store it (one key changes)."""
        field, error = self._editable(name)
        if error is not None:
            return error
        try:
            value = coerce_value(field.value_type, raw)
        except ValueError as exc:
            logger.warning(f"Rejected edit of '{name}': {exc}")
            return ParseResult.failure(str(exc), field=name)
        self.store.set(name, value)
        return ParseResult.success(value, field=name)

    def _array_op(self, name: str, op: Callable[[List[str]], List[str]]) -> ParseResult:
        _, error = self._editable(name, ValueType.STRING_ARRAY)
        if error is not None:
            return error
        try:
            current = coerce_value(ValueType.STRING_ARRAY, self.store.get(name))
            updated = op(current)
        except (IndexError, ValueError) as exc:
            return ParseResult.failure(str(exc), field=name)
        self.store.set(name, updated)
        return ParseResult.success(updated, field=name)

    def add_item(self, name: str, value: str = "") -> ParseResult:
        return self._array_op(name, lambda items: array_fields.add_item(items, value))

    def remove_item(self, name: str, index: int) -> ParseResult:
        return self._array_op(name, lambda items: array_fields.remove_at(items, index))

    def set_item(self, name: str, index: int, value: str) -> ParseResult:
        return self._array_op(name, lambda items: array_fields.set_at(items, index, value))

    def set_array_text(self, name: str, text: str) -> ParseResult:
        return self._array_op(name, lambda _: array_fields.split_comma_text(text))

    def array_text(self, name: str) -> str:
        """Comma text of a list field; a value left as text by a raw edit is split first."""
        try:
            items = coerce_value(ValueType.STRING_ARRAY, self.store.get(name))
        except ValueError:
            logger.warning(f"Field '{name}' does not hold a list")
            return ""
        return array_fields.join_comma_text(items)

    def set_metadata(self, name: str, value: Any) -> ParseResult:
        """Edit a record-level field (``name``, ``tags``, ``actorReference`` …)."""
        if not self.is_open:
            return ParseResult.failure("Session is not open", field=name)
        data = self.metadata.model_dump(by_alias=True)
        if name not in data:
            return ParseResult.failure(f"Unknown metadata field '{name}'", field=name)
        data[name] = value
        try:
            self.metadata = TemplateMetadata.model_validate(data)
        except ValueError as exc:
            return ParseResult.failure(str(exc), field=name)
        return ParseResult.success(self.metadata.model_dump(by_alias=True)[name], field=name)

    # ------------------------------------------------------------------
    # Raw editing
    # ------------------------------------------------------------------
    def switch_to_raw(self) -> str:
        """Serialize the store into the mirror and enter raw mode."""
        if self.mode is EditMode.STRUCTURED:
            self.mirror.refresh(self.store, self.schema)
            self.mode = EditMode.RAW
            logger.debug("Switched to raw mode")
        return self.mirror.text

    def type_raw(self, text: str) -> ParseResult:
        """A keystroke in raw mode; a successful parse replaces the store wholesale."""
        if self.mode is not EditMode.RAW:
            return ParseResult.failure("Session is in structured mode")
        result = self.mirror.update(text)
        if result.ok:
            self.store.replace(result.value)
        return result

    def switch_to_structured(self) -> ParseResult:
        """
        Leave raw mode.  If the text does not parse the session stays in raw
        mode and the store keeps its last parsed state.
        """
        if self.mode is EditMode.STRUCTURED:
            return ParseResult.success(self.store.to_dict())
        result = parse(self.mirror.text)
        if not result.ok:
            logger.warning(f"Staying in raw mode: {result.error}")
            return result
        self.store.replace(result.value)
        if not self.structured_enabled:
            return ParseResult.failure("Structured editing is unavailable without a schema")
        self.mode = EditMode.STRUCTURED
        logger.debug("Switched to structured mode")
        return ParseResult.success(self.store.to_dict())

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------
    def preview(self) -> BuildResult:
        """Build the payload without submitting it."""
        return build_payload(
            self.store,
            self.schema,
            actor_reference=self.metadata.actor_reference,
            metadata=self.metadata,
            legacy_names=self.legacy_names,
            id_pattern=self.id_pattern,
        )

    def save(self) -> SubmissionOutcome:
        """
        Validate and submit once.  On success the session closes; on any
        failure it stays open with its values for correction.
        """
        if not self.is_open:
            return SubmissionOutcome.transport_error("Session is not open")

        built = self.preview()
        if not built.ok:
            return SubmissionOutcome.validation_failed(built.fields)
        if self.persistence is None:
            return SubmissionOutcome.transport_error(
                "No persistence backend configured", built.unverified_reference
            )

        try:
            data = self.persistence.save_template(built.payload, self.record_id)
        except ConsoleException as exc:
            logger.error(f"Saving configuration failed: {exc.message}")
            return SubmissionOutcome.transport_error(exc.message, built.unverified_reference)
        except Exception as exc:
            logger.exception("Saving configuration failed unexpectedly")
            return SubmissionOutcome.transport_error(
                f"{type(exc).__name__}: {exc}", built.unverified_reference
            )

        logger.info(f"Saved configuration {self.record_id or '(new)'}")
        self._discard()
        return SubmissionOutcome.success(data, built.unverified_reference)
