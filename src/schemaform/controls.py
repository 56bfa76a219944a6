"""Headless form element holding a live set of controls."""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from schemaform import logger
from schemaform.typing.enums import ControlKind
from schemaform.typing.models import ChangeEvent, FieldEntry

if TYPE_CHECKING:
    from collections.abc import Iterable

_CHECKABLE_TYPES = frozenset({"checkbox", "radio"})
_BUTTON_TYPES = frozenset({"submit", "button", "reset", "image"})


class Control(BaseModel):
    """Single input control.

    Defaults are captured at construction and restored by `InMemoryForm.reset`.
    Checkable controls without an explicit value carry ``"on"``.
    """

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    name: str = ""
    type: str = "text"
    value: str = ""
    checked: bool = False
    disabled: bool = False

    _default_value: str = PrivateAttr(default="")
    _default_checked: bool = PrivateAttr(default=False)

    def model_post_init(self, __context: object, /) -> None:
        """Capture default state after model initialization.

        Args:
            __context (object): Pydantic model context.
        """
        if self.is_checkable and not self.value:
            self.value = "on"
        self._default_value = self.value
        self._default_checked = self.checked

    @property
    def kind(self) -> ControlKind:
        """Return the coercion family for this control."""
        return ControlKind.from_control_type(self.type)

    @property
    def is_checkable(self) -> bool:
        """Return whether the control contributes only while checked."""
        return self.type.lower() in _CHECKABLE_TYPES

    def restore_default(self) -> None:
        """Revert value and checked state to their defaults."""
        self.value = self._default_value
        self.checked = self._default_checked

    def to_entry(self) -> FieldEntry | None:
        """Return the entry this control contributes, if any.

        Returns:
            FieldEntry | None: ``None`` for unnamed, disabled, button or unchecked controls.
        """
        if not self.name or self.disabled or self.type.lower() in _BUTTON_TYPES:
            return None
        if self.is_checkable and not self.checked:
            return None
        return FieldEntry(name=self.name, value=self.value, kind=self.kind, checked=self.checked)


class InMemoryForm(BaseModel):
    """Form element implementation backed by `Control` instances."""

    model_config = ConfigDict(extra="forbid")

    controls: list[Control] = Field(default_factory=list)
    native_submissions: list[list[FieldEntry]] = Field(
        default_factory=list,
        description="Entry snapshots recorded by native submissions.",
    )

    def add(self, *controls: Control) -> InMemoryForm:
        """Append controls in document order.

        Args:
            *controls (Control): Controls to append.

        Returns:
            InMemoryForm: The form, for chaining.
        """
        self.controls.extend(controls)
        return self

    def find(self, name: str) -> Control | None:
        """Return the first control carrying a name.

        Args:
            name (str): Field name.

        Returns:
            Control | None: Matching control.
        """
        return next((control for control in self.controls if control.name == name), None)

    def entries(self) -> list[FieldEntry]:
        """Capture current field entries in document order.

        Returns:
            list[FieldEntry]: Entries for every successful control.
        """
        return [entry for entry in (control.to_entry() for control in self.controls) if entry is not None]

    def contains(self, control: object) -> bool:
        """Return whether the exact control instance belongs to this form.

        Args:
            control (object): Candidate control.

        Returns:
            bool: True when the control was added to this form.
        """
        return any(candidate is control for candidate in self.controls)

    def reset(self) -> None:
        """Revert every control to its default state."""
        for control in self.controls:
            control.restore_default()

    def submit(self) -> None:
        """Record a native submission of the current entries."""
        entries = self.entries()
        self.native_submissions.append(entries)
        logger.info("Native form submission", extra={"fields": len(entries)})

    def change(self, control: Control, *, value: str | None = None, checked: bool | None = None) -> ChangeEvent:
        """Update a control and return the change event it fires.

        Args:
            control (Control): Control being edited.
            value (str | None): New value.
            checked (bool | None): New checked state.

        Returns:
            ChangeEvent: Event targeting the control.
        """
        if value is not None:
            control.value = value
        if checked is not None:
            control.checked = checked
        return ChangeEvent(target=control)


def build_form(controls: Iterable[Control]) -> InMemoryForm:
    """Create a form holding the given controls.

    Args:
        controls (Iterable[Control]): Controls in document order.

    Returns:
        InMemoryForm: New form.
    """
    return InMemoryForm(controls=list(controls))
