"""Package exceptions."""

from __future__ import annotations

from dataclasses import dataclass


class PackageError(Exception):
    """Root exception for the package."""


@dataclass(frozen=True)
class SettingsError(PackageError):
    """Raised when settings cannot be loaded or validated."""

    message: str = "Failed to load settings"
    exc: BaseException | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}" if self.exc else self.message


@dataclass(frozen=True)
class AsyncExecutionError(PackageError):
    """Raised when an async operation fails in compatibility runner."""

    result: BaseException
    message: str = "Async operation failed"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.result}"


@dataclass(frozen=True)
class SchemaSourceError(PackageError):
    """Raised when a schema input is neither a mapping nor a supported reference."""

    message: str

    def __str__(self) -> str:
        """Return error message payload."""
        return self.message


@dataclass(frozen=True)
class SchemaFetchError(PackageError):
    """Raised when a referenced schema cannot be fetched or parsed."""

    reference: str
    message: str
    status_code: int | None = None

    def __str__(self) -> str:
        """Return error message payload."""
        if self.status_code is not None:
            return f"{self.message} ({self.reference}, status {self.status_code})"
        return f"{self.message} ({self.reference})"


@dataclass(frozen=True)
class ValidatorError(PackageError):
    """Raised when the injected validator fails instead of returning errors."""

    exc: BaseException
    message: str = "Validator raised"

    def __str__(self) -> str:
        """Return error message payload."""
        return f"{self.message}: {self.exc}"
