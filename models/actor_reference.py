# models/actor_reference.py
"""
Tagged union for the linked actor/processor reference.

Backend documents carry the actor as an embedded object, a bare identifier or
(legacy records) the actor's display name.  The reference is classified once
at the boundary; everything downstream works with ``ResolvedReference``.
"""
from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class Identifier(BaseModel):
    kind: Literal["identifier"] = "identifier"
    value: str


class EmbeddedReference(BaseModel):
    kind: Literal["embedded"] = "embedded"
    id: str
    name: Optional[str] = None


class LegacyName(BaseModel):
    kind: Literal["legacyName"] = "legacyName"
    name: str


ActorReference = Annotated[
    Union[Identifier, EmbeddedReference, LegacyName],
    Field(discriminator="kind"),
]


class ResolvedReference(BaseModel):
    """
    Canonical actor link.

    ``actor_id`` is the only value ever submitted; ``display_name`` is a side
    annotation for the UI.  ``unverified`` marks a reference that could not be
    confirmed as an identifier – it is submitted as-is but flagged.
    """

    actor_id: str = ""
    display_name: Optional[str] = None
    unverified: bool = False

    model_config = ConfigDict(frozen=True)

    @property
    def is_empty(self) -> bool:
        return not self.actor_id.strip()
