from .field_schema import EditorHint, FieldSchema, ValueType
from .actor_reference import (
    ActorReference,
    EmbeddedReference,
    Identifier,
    LegacyName,
    ResolvedReference,
)
from .results import (
    BuildResult,
    ParseResult,
    SchemaLoadResult,
    SchemaState,
    SubmissionOutcome,
    SubmissionStatus,
)
from .template_metadata import METADATA_FIELDS, TemplateMetadata

__all__ = [
    'EditorHint', 'FieldSchema', 'ValueType',
    'ActorReference', 'EmbeddedReference', 'Identifier', 'LegacyName', 'ResolvedReference',
    'BuildResult', 'ParseResult', 'SchemaLoadResult', 'SchemaState',
    'SubmissionOutcome', 'SubmissionStatus',
    'METADATA_FIELDS', 'TemplateMetadata',
]
