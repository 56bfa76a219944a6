"""Typing-centric domain modules."""

from schemaform.typing.enums import ControlKind, ControllerPhase, ValidationMode
from schemaform.typing.models import (
    ChangeEvent,
    ChangeSet,
    FieldEntry,
    FormHandle,
    FormOptions,
    FormSnapshot,
    JsonSchema,
    SubmitEvent,
    ValidationIssue,
    ValidationOutcome,
)
from schemaform.typing.protocol import FormElement, SchemaFetcher, Validator

__all__ = [
    "ChangeEvent",
    "ChangeSet",
    "ControlKind",
    "ControllerPhase",
    "FieldEntry",
    "FormElement",
    "FormHandle",
    "FormOptions",
    "FormSnapshot",
    "JsonSchema",
    "SchemaFetcher",
    "SubmitEvent",
    "ValidationIssue",
    "ValidationMode",
    "ValidationOutcome",
    "Validator",
]
