# models/results.py
"""
Typed outcomes returned by the configuration engine.

Nothing in the engine lets an exception escape to the UI layer; every
recoverable condition is reported through one of these models and the UI
decides how to present it.
"""
from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from pydantic import BaseModel, Field

from .field_schema import FieldSchema


class SchemaState(str, Enum):
    LOADING = "loading"
    READY = "ready"
    UNAVAILABLE = "unavailable"


class SchemaLoadResult(BaseModel):
    identifier: str
    status: SchemaState
    fields: Tuple[FieldSchema, ...] = ()
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status is SchemaState.READY


class ParseResult(BaseModel):
    """Outcome of parsing raw text or coercing a single field edit."""

    ok: bool
    value: Any = None
    error: Optional[str] = None
    field: Optional[str] = None

    @classmethod
    def success(cls, value: Any = None, field: Optional[str] = None) -> "ParseResult":
        return cls(ok=True, value=value, field=field)

    @classmethod
    def failure(cls, error: str, field: Optional[str] = None) -> "ParseResult":
        return cls(ok=False, error=error, field=field)


class BuildResult(BaseModel):
    """Output of the submission builder – a payload or the failing fields."""

    ok: bool
    payload: Optional[Dict[str, Any]] = None
    fields: List[str] = Field(default_factory=list)
    unverified_reference: bool = False


class SubmissionStatus(str, Enum):
    SUCCESS = "success"
    VALIDATION_FAILED = "validationFailed"
    TRANSPORT_ERROR = "transportError"


class SubmissionOutcome(BaseModel):
    status: SubmissionStatus
    fields: List[str] = Field(default_factory=list)
    message: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    unverified_reference: bool = False

    @classmethod
    def success(
        cls, data: Optional[Dict[str, Any]] = None, unverified_reference: bool = False
    ) -> "SubmissionOutcome":
        return cls(
            status=SubmissionStatus.SUCCESS,
            data=data,
            unverified_reference=unverified_reference,
        )

    @classmethod
    def validation_failed(cls, fields: List[str]) -> "SubmissionOutcome":
        return cls(status=SubmissionStatus.VALIDATION_FAILED, fields=list(fields))

    @classmethod
    def transport_error(
        cls, message: str, unverified_reference: bool = False
    ) -> "SubmissionOutcome":
        return cls(
            status=SubmissionStatus.TRANSPORT_ERROR,
            message=message,
            unverified_reference=unverified_reference,
        )
