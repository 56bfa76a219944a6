"""Validation result models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ValidationIssue(BaseModel):
    """Single JSON Schema violation reported by the bundled validator."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    path: str = ""
    message: str
    keyword: str | None = None

    def __str__(self) -> str:
        """Return a readable `path: message` form."""
        return f"{self.path}: {self.message}" if self.path else self.message


class ValidationOutcome(BaseModel):
    """Structured data and the errors found for it."""

    model_config = ConfigDict(extra="forbid")

    data: dict[str, Any] = Field(default_factory=dict)
    errors: list[Any] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        """Return whether no errors were reported."""
        return not self.errors
