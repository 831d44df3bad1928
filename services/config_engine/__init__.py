"""
Schema-driven configuration engine for actor templates and campaigns.
"""
from .edit_session import EditMode, EditSession, ScopedEffect
from .normalizer import normalize
from .reference_resolver import resolve_actor_reference
from .schema_registry import SchemaRegistry
from .submission_builder import build_payload
from .text_mirror import TextMirror, parse, serialize
from .value_store import ValueStore

__all__ = [
    'EditMode', 'EditSession', 'ScopedEffect',
    'normalize', 'resolve_actor_reference', 'SchemaRegistry', 'build_payload',
    'TextMirror', 'parse', 'serialize', 'ValueStore',
]
