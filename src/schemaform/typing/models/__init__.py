"""Core domain model exports."""

from schemaform.typing.models.events import ChangeEvent, SubmitEvent
from schemaform.typing.models.fields import ChangeSet, FieldEntry
from schemaform.typing.models.form import FormHandle, FormOptions, FormSnapshot
from schemaform.typing.models.schema import JSON_SCHEMA_ADAPTER, JsonSchema
from schemaform.typing.models.validation import ValidationIssue, ValidationOutcome

__all__ = [
    "JSON_SCHEMA_ADAPTER",
    "ChangeEvent",
    "ChangeSet",
    "FieldEntry",
    "FormHandle",
    "FormOptions",
    "FormSnapshot",
    "JsonSchema",
    "SubmitEvent",
    "ValidationIssue",
    "ValidationOutcome",
]
