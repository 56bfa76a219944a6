"""Lookup of the schema fragment governing a form field."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from schemaform.processing.nesting import parse_field_path


def resolve_field_schema(name: str, schema: Mapping[str, Any] | None) -> Any:  # noqa: ANN401
    """Walk declared object properties following a field name.

    Args:
        name (str): Dotted/bracketed field name.
        schema (Mapping[str, Any] | None): Root schema, ``None`` while unresolved.

    Returns:
        Any: Schema fragment for the field, or ``None`` when the path does not resolve.
    """
    node: Any = schema
    for segment in parse_field_path(name):
        if not isinstance(node, Mapping):
            return None
        properties = node.get("properties")
        if not isinstance(properties, Mapping) or segment not in properties:
            return None
        node = properties[segment]
    return node
