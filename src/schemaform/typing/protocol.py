"""Collaborator interfaces consumed by the form controller."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Awaitable, Sequence

    from schemaform.typing.models import FieldEntry, JsonSchema


class Validator(Protocol):
    """Validation capability interface."""

    def validate(self, schema: JsonSchema, data: dict[str, Any]) -> Sequence[Any] | Awaitable[Sequence[Any]]:
        """Validate structured data against a schema.

        Args:
            schema: Resolved JSON Schema.
            data: Structured data built from the form fields.

        Returns:
            Sequence[Any] | Awaitable[Sequence[Any]]: Errors, empty when the data conforms.
        """


class FormElement(Protocol):
    """Live set of rendered controls owned by one form."""

    def entries(self) -> list[FieldEntry]:
        """Capture the current field entries in document order.

        Returns:
            list[FieldEntry]: Entries for every successful control.
        """

    def contains(self, control: object) -> bool:
        """Return whether a control belongs to this form.

        Args:
            control: Candidate control.

        Returns:
            bool: True when the control is one of the form's descendants.
        """

    def reset(self) -> None:
        """Revert every control to its default value."""

    def submit(self) -> None:
        """Perform the native submission behavior."""


class SchemaFetcher(Protocol):
    """Transport used to fetch a referenced schema."""

    async def fetch(self, reference: str) -> JsonSchema:
        """Fetch and parse a schema document.

        Args:
            reference: URL or absolute path.

        Returns:
            JsonSchema: Parsed schema.
        """
