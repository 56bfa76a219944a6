"""Events delivered to the controller by the surrounding environment."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ChangeEvent:
    """A value change bubbling up from a control."""

    target: object | None


@dataclass
class SubmitEvent:
    """A submit action whose default navigation can be prevented."""

    default_prevented: bool = False

    def prevent_default(self) -> None:
        """Cancel the native submission triggered by this action."""
        self.default_prevented = True
