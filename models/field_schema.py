# models/field_schema.py
"""
Declarative description of one configurable actor parameter.

The backend describes actor input with its own vocabulary (``text``,
``number``, ``array`` …).  ``FieldSchema`` accepts that wire format as well as
the canonical names and always exposes one of the five ``ValueType`` members.
"""
from __future__ import annotations

import copy
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ValueType(str, Enum):
    STRING = "string"
    URL = "url"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    STRING_ARRAY = "stringArray"


class EditorHint(str, Enum):
    """Advisory widget choice – never changes ``ValueType`` semantics."""
    TEXT = "text"
    TEXTAREA = "textarea"
    NUMBER = "number"
    TOGGLE = "toggle"
    LIST = "list"


# Backend / JSON-schema type names → canonical value type
WIRE_TYPES: Dict[str, ValueType] = {
    "text": ValueType.STRING,
    "textarea": ValueType.STRING,
    "string": ValueType.STRING,
    "url": ValueType.URL,
    "number": ValueType.INTEGER,
    "integer": ValueType.INTEGER,
    "boolean": ValueType.BOOLEAN,
    "array": ValueType.STRING_ARRAY,
    "stringArray": ValueType.STRING_ARRAY,
}

_DEFAULT_HINTS: Dict[ValueType, EditorHint] = {
    ValueType.STRING: EditorHint.TEXT,
    ValueType.URL: EditorHint.TEXT,
    ValueType.INTEGER: EditorHint.NUMBER,
    ValueType.BOOLEAN: EditorHint.TOGGLE,
    ValueType.STRING_ARRAY: EditorHint.LIST,
}


def value_type_from_wire(name: Optional[str]) -> ValueType:
    """Map a wire type name to ``ValueType``; unknown names become ``string``."""
    if isinstance(name, ValueType):
        return name
    return WIRE_TYPES.get(name or "", ValueType.STRING)


def empty_value(value_type: ValueType) -> Any:
    """Type-appropriate empty value (a fresh list for arrays)."""
    if value_type is ValueType.INTEGER:
        return 0
    if value_type is ValueType.BOOLEAN:
        return False
    if value_type is ValueType.STRING_ARRAY:
        return []
    return ""


_TRUE_WORDS = {"true", "1", "yes", "on"}
_FALSE_WORDS = {"false", "0", "no", "off", ""}


def split_comma_text(text: str) -> List[str]:
    """Split comma-separated text, trimming items and dropping empty ones."""
    return [item.strip() for item in text.split(",") if item.strip()]


def coerce_value(value_type: ValueType, raw: Any) -> Any:
    """
    Convert an operator-supplied value to *value_type*.

    Raises ``ValueError`` when the value cannot be represented (e.g. ``"abc"``
    for an integer field).
    """
    if raw is None:
        return empty_value(value_type)

    if value_type is ValueType.INTEGER:
        if isinstance(raw, bool):
            raise ValueError(f"Expected an integer, got boolean {raw!r}")
        if isinstance(raw, int):
            return raw
        if isinstance(raw, float):
            if raw.is_integer():
                return int(raw)
            raise ValueError(f"Expected an integer, got {raw!r}")
        text = str(raw).strip()
        if not text:
            return 0
        try:
            return int(text)
        except ValueError as exc:
            raise ValueError(f"Expected an integer, got {raw!r}") from exc

    if value_type is ValueType.BOOLEAN:
        if isinstance(raw, bool):
            return raw
        if isinstance(raw, int) and raw in (0, 1):
            return bool(raw)
        word = str(raw).strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
        raise ValueError(f"Expected a boolean, got {raw!r}")

    if value_type is ValueType.STRING_ARRAY:
        if isinstance(raw, str):
            return split_comma_text(raw)
        if isinstance(raw, (list, tuple)):
            return ["" if item is None else str(item) for item in raw]
        raise ValueError(f"Expected a list of strings, got {raw!r}")

    # string / url
    if isinstance(raw, (dict, list, tuple)):
        raise ValueError(f"Expected text, got {raw!r}")
    return raw if isinstance(raw, str) else str(raw)


def _matches(value_type: ValueType, value: Any) -> bool:
    if value_type is ValueType.BOOLEAN:
        return isinstance(value, bool)
    if value_type is ValueType.INTEGER:
        return isinstance(value, int) and not isinstance(value, bool)
    if value_type is ValueType.STRING_ARRAY:
        return isinstance(value, list) and all(isinstance(v, str) for v in value)
    return isinstance(value, str)


class FieldSchema(BaseModel):
    """One configurable parameter of a template or actor."""

    name: str = Field(..., min_length=1)
    label: str = ""
    value_type: ValueType = Field(ValueType.STRING, alias="valueType")
    default: Any = None
    required: bool = False
    description: Optional[str] = None
    editor_hint: Optional[EditorHint] = Field(None, alias="editorHint")

    # Display / range metadata carried by the backend descriptors
    placeholder: Optional[str] = None
    min: Optional[int] = None
    max: Optional[int] = None

    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def _from_wire(cls, data: Any) -> Any:
        """
        Accept backend descriptors: ``type`` instead of ``valueType`` and
        ``editor`` instead of ``editorHint``.
        """
        if not isinstance(data, dict):
            return data
        data = dict(data)
        if "valueType" not in data and "value_type" not in data and "type" in data:
            data["valueType"] = value_type_from_wire(data.pop("type"))
        if "editorHint" not in data and "editor_hint" not in data and "editor" in data:
            data["editorHint"] = data.pop("editor")
        # an unknown hint is advisory only – fall back to the type default
        hint = data.get("editorHint")
        if hint is not None and getattr(hint, "value", hint) not in {h.value for h in EditorHint}:
            data.pop("editorHint")
        return data

    @model_validator(mode="after")
    def _fill_defaults(self) -> "FieldSchema":
        # frozen model – use object.__setattr__ for the derived values
        if not self.label:
            object.__setattr__(self, "label", self.name)
        if self.editor_hint is None:
            object.__setattr__(self, "editor_hint", _DEFAULT_HINTS[self.value_type])
        if self.default is None:
            object.__setattr__(self, "default", empty_value(self.value_type))
        elif not _matches(self.value_type, self.default):
            try:
                coerced = coerce_value(self.value_type, self.default)
            except ValueError as exc:
                raise ValueError(
                    f"Default of field '{self.name}' does not match "
                    f"type '{self.value_type.value}': {exc}"
                ) from exc
            object.__setattr__(self, "default", coerced)
        return self

    def default_value(self) -> Any:
        """A copy of ``default`` safe to put in a value store."""
        return copy.deepcopy(self.default)
