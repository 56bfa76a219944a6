"""Controller-facing configuration and snapshot types."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from schemaform.typing.enums import ValidationMode

if TYPE_CHECKING:
    from schemaform.settings import Settings
    from schemaform.typing.models.validation import ValidationOutcome
    from schemaform.typing.protocol import FormElement


class FormOptions(BaseModel):
    """Recognized form behavior options."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    validation_mode: ValidationMode = ValidationMode.SUBMIT
    revalidate_on_error: bool = True
    reset_on_submit: bool = False
    hidden_submit: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> FormOptions:
        """Build options from runtime settings defaults.

        Args:
            settings (Settings): Runtime settings.

        Returns:
            FormOptions: Options mirroring the configured defaults.
        """
        return cls(
            validation_mode=settings.validation_mode,
            revalidate_on_error=settings.revalidate_on_error,
            reset_on_submit=settings.reset_on_submit,
            hidden_submit=settings.hidden_submit,
        )


@dataclass(frozen=True)
class FormSnapshot:
    """Render-time view of the controller state."""

    errors: list[Any]
    schema: dict[str, Any] | None
    submitting: bool
    dirty: bool
    hidden_submit: bool
    submit: Callable[[], Awaitable[None]] = field(repr=False)
    reset: Callable[[], None] = field(repr=False)
    reset_dirty: Callable[[], None] = field(repr=False)

    @property
    def submit_disabled(self) -> bool:
        """Return whether the fallback submit control must be disabled."""
        return bool(self.errors)


@dataclass(frozen=True)
class FormHandle:
    """Imperative handle for callers holding a form instance."""

    submit: Callable[[], Awaitable[None]] = field(repr=False)
    validate: Callable[[], Awaitable[ValidationOutcome]] = field(repr=False)
    reset: Callable[[], None] = field(repr=False)
    reset_dirty: Callable[[], None] = field(repr=False)
    form: FormElement
