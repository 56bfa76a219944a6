"""Field-level domain models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from schemaform.typing.enums import ControlKind


class FieldEntry(BaseModel):
    """One (name, raw value, control kind) observation taken from a rendered control."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    value: str
    kind: ControlKind = ControlKind.TEXT
    checked: bool = False


class ChangeSet(BaseModel):
    """Descriptor of the single control that triggered a change."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    value: str | None = None
