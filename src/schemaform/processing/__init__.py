"""Form data processing helpers."""

from schemaform.processing.field_paths import resolve_field_schema
from schemaform.processing.nesting import coerce_entry_value, entries_to_nested_object, parse_field_path

__all__ = [
    "coerce_entry_value",
    "entries_to_nested_object",
    "parse_field_path",
    "resolve_field_schema",
]
