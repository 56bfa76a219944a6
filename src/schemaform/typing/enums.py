"""Project enums."""

from __future__ import annotations

from enum import StrEnum

_NUMERIC_CONTROL_TYPES = frozenset({"number"})
_TEXT_CONTROL_TYPES = frozenset({"text", "email", "password", "search", "tel", "url", "textarea", "hidden"})


class _EnumMixin(StrEnum):
    """Shared conversion helpers for user-facing enums."""

    @classmethod
    def from_str(cls, value: str) -> _EnumMixin:
        """Parse enum from string.

        Args:
            value: Raw string value.

        Raises:
            ValueError: If the value is not supported.

        Returns:
            _EnumMixin: Parsed enum value.
        """
        try:
            return cls(value)
        except ValueError as exc:
            supported = ", ".join(member.value for member in cls)
            message = f"Unsupported {cls.__name__} value '{value}'. Expected one of: {supported}"
            raise ValueError(message) from exc

    def to_str(self) -> str:
        """Return string representation.

        Returns:
            str: Enum string value.
        """
        return self.value


class ControlKind(_EnumMixin):
    """Coercion family of a rendered control."""

    TEXT = "text"
    NUMBER = "number"
    CHECKBOX = "checkbox"
    OTHER = "other"

    @classmethod
    def from_control_type(cls, control_type: str) -> ControlKind:
        """Map an HTML-style input type to its coercion family.

        Args:
            control_type: Input type such as ``"number"`` or ``"checkbox"``.

        Returns:
            ControlKind: Matching kind, ``OTHER`` for unknown types.
        """
        normalized = control_type.strip().lower()
        if normalized in _NUMERIC_CONTROL_TYPES:
            return cls.NUMBER
        if normalized == "checkbox":
            return cls.CHECKBOX
        if normalized in _TEXT_CONTROL_TYPES:
            return cls.TEXT
        return cls.OTHER


class ValidationMode(_EnumMixin):
    """When the controller validates on its own."""

    SUBMIT = "submit"
    CHANGE = "change"


class ControllerPhase(_EnumMixin):
    """Binary submit lifecycle state."""

    IDLE = "idle"
    SUBMITTING = "submitting"
