"""Nested data reconstruction from flat form field entries."""

from __future__ import annotations

import math
import re
from typing import TYPE_CHECKING, Any

from schemaform.typing.enums import ControlKind

if TYPE_CHECKING:
    from collections.abc import Iterable

    from schemaform.typing.models import FieldEntry

_BRACKET_SEGMENT = re.compile(r"\[([^\]]*)\]")
_INTEGER_LITERAL = re.compile(r"[+-]?[0-9]+")


def parse_field_path(name: str) -> list[str]:
    """Split a dotted/bracketed field name into path segments.

    ``user.address[street]`` becomes ``["user", "address", "street"]``. Empty
    segments are dropped, so ``tags[]`` yields ``["tags"]``.

    Args:
        name (str): Field name as carried by the control.

    Returns:
        list[str]: Non-empty path segments.
    """
    dotted = _BRACKET_SEGMENT.sub(r".\1", name)
    return [segment for segment in dotted.split(".") if segment]


def coerce_entry_value(entry: FieldEntry) -> Any:  # noqa: ANN401
    """Coerce a raw entry value according to its control kind.

    Args:
        entry (FieldEntry): Field entry.

    Returns:
        Any: Number for parseable numeric controls, checked state for
            checkboxes, raw text otherwise.
    """
    if entry.kind == ControlKind.CHECKBOX:
        return entry.checked
    if entry.kind == ControlKind.NUMBER:
        return _parse_number(entry.value)
    return entry.value


def _parse_number(value: str) -> int | float | str:
    text = value.strip()
    if not text or "_" in text:
        return value
    if _INTEGER_LITERAL.fullmatch(text):
        return int(text)
    try:
        number = float(text)
    except ValueError:
        return value
    if not math.isfinite(number):
        return value
    return number


def entries_to_nested_object(entries: Iterable[FieldEntry]) -> dict[str, Any]:
    """Build a nested mapping from flat field entries.

    Repeated keys turn the leaf into a list in entry order. A scalar standing
    where an intermediate mapping is needed is replaced by a mapping.

    Args:
        entries (Iterable[FieldEntry]): Entries in document order.

    Returns:
        dict[str, Any]: Reconstructed structured data.
    """
    result: dict[str, Any] = {}

    for entry in entries:
        if entry.value == "":
            continue

        path = parse_field_path(entry.name)
        if not path:
            continue

        current = result
        for key in path[:-1]:
            child = current.get(key)
            if not isinstance(child, dict):
                child = {}
                current[key] = child
            current = child

        leaf = path[-1]
        value = coerce_entry_value(entry)
        if leaf not in current:
            current[leaf] = value
            continue

        existing = current[leaf]
        if not isinstance(existing, list):
            existing = [existing]
            current[leaf] = existing
        existing.append(value)

    return result
