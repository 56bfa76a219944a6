"""Validation capability adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from jsonschema.validators import validator_for

from schemaform.typing.models import ValidationIssue

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping, Sequence

    from jsonschema.exceptions import ValidationError as JsonSchemaValidationError

    from schemaform.typing.protocol import Validator

    ValidateFn = Callable[[Mapping[str, Any], dict[str, Any]], Sequence[Any] | Awaitable[Sequence[Any]]]


class FunctionValidator:
    """Expose a plain `validate(schema, data)` callable as a validator object."""

    def __init__(self, function: ValidateFn) -> None:
        """Initialize adapter.

        Args:
            function (ValidateFn): Callable returning errors, optionally awaitable.
        """
        self._function = function

    def validate(self, schema: Mapping[str, Any], data: dict[str, Any]) -> Sequence[Any] | Awaitable[Sequence[Any]]:
        """Delegate to the wrapped callable."""
        return self._function(schema, data)


def as_validator(candidate: Validator | ValidateFn) -> Validator:
    """Normalize a validator object or plain function.

    Args:
        candidate (Validator | ValidateFn): Object with `validate` or a callable.

    Raises:
        TypeError: If the candidate offers neither.

    Returns:
        Validator: Object exposing `validate(schema, data)`.
    """
    if callable(getattr(candidate, "validate", None)):
        return candidate  # type: ignore[return-value]
    if callable(candidate):
        return FunctionValidator(candidate)
    raise TypeError(f"Validator must define validate(schema, data) or be callable, got: {candidate!r}")  # noqa: TRY003


class JsonSchemaValidator:
    """Validator backed by the `jsonschema` library.

    The draft is picked from the schema's `$schema` keyword, falling back to
    the latest draft supported by the installed library.
    """

    def validate(self, schema: Mapping[str, Any], data: dict[str, Any]) -> list[ValidationIssue]:
        """Validate data and report every violation.

        Args:
            schema (Mapping[str, Any]): JSON Schema.
            data (dict[str, Any]): Structured form data.

        Returns:
            list[ValidationIssue]: Violations in library iteration order.
        """
        validator_cls = validator_for(schema)
        validator = validator_cls(schema)
        return [_to_issue(error) for error in validator.iter_errors(data)]


def _to_issue(error: JsonSchemaValidationError) -> ValidationIssue:
    path = ".".join(str(part) for part in error.absolute_path)
    keyword = error.validator if isinstance(error.validator, str) else None
    return ValidationIssue(path=path, message=error.message, keyword=keyword)
