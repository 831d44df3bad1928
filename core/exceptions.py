# core/exceptions.py
"""
Exception hierarchy for the console.

Collaborators (HTTP client, text parsing, YAML loading) raise these.  The
configuration engine catches them at its boundary and turns them into the
typed results in ``models.results`` – none of them escape an edit session.
"""

from typing import Any, Dict, Optional


class ConsoleException(Exception):
    """Base class – carries a stable machine-readable ``code``."""

    code = "CONSOLE_ERROR"

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code

    def to_dict(self) -> Dict[str, Any]:
        return {"error": {"code": self.code, "message": self.message}}


class SchemaUnavailableError(ConsoleException):
    """The field schema for a template/actor could not be fetched."""

    code = "SCHEMA_UNAVAILABLE"

    def __init__(self, identifier: str, reason: str = ""):
        message = f"Schema for '{identifier}' is unavailable"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
        self.identifier = identifier


class ParseFailedError(ConsoleException):
    """Raw configuration text is not a JSON object."""

    code = "PARSE_FAILED"


class TransportError(ConsoleException):
    """A call to the persistence/listing backend failed."""

    code = "TRANSPORT_ERROR"

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["error"]["status"] = self.status_code
        return data


class OverlayConfigError(ConsoleException):
    """``overlays.yaml`` is missing or does not match the expected layout."""

    code = "OVERLAY_CONFIG_INVALID"
