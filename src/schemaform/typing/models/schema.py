"""Schema-centric domain types."""

from __future__ import annotations

from typing import Any, TypeAlias

from pydantic import TypeAdapter

JsonSchema: TypeAlias = dict[str, Any]

# Referenced schemas must decode to a JSON object.
JSON_SCHEMA_ADAPTER: TypeAdapter[dict[str, Any]] = TypeAdapter(dict[str, Any])
