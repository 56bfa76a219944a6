"""Form controller: schema resolution, dirty tracking, validation and submit lifecycle."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from schemaform import logger
from schemaform.async_runner import resolve_awaitable
from schemaform.exceptions import ValidatorError
from schemaform.processing import entries_to_nested_object, resolve_field_schema
from schemaform.schema_source import SchemaSource, ensure_schema_input, is_schema_reference
from schemaform.settings import get_settings
from schemaform.typing.enums import ControllerPhase, ValidationMode
from schemaform.typing.models import (
    ChangeSet,
    FormHandle,
    FormOptions,
    FormSnapshot,
    ValidationOutcome,
)
from schemaform.validators import as_validator

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from schemaform.typing.models import ChangeEvent, FieldEntry, SubmitEvent
    from schemaform.typing.protocol import FormElement, Validator
    from schemaform.validators import ValidateFn

    ChangeCallback = Callable[[dict[str, Any], ChangeSet], Awaitable[None] | None]
    SubmitCallback = Callable[[dict[str, Any]], Awaitable[None] | None]
    SubmitInvalidCallback = Callable[[list[Any], dict[str, Any]], Awaitable[None] | None]
    SnapshotListener = Callable[[FormSnapshot], None]

_UNSET: Any = object()


def _first_value(entries: list[FieldEntry], name: str) -> str | None:
    """Return the first raw value carried under a field name.

    Args:
        entries (list[FieldEntry]): Current entries.
        name (str): Field name.

    Returns:
        str | None: Raw value, ``None`` when no entry carries the name.
    """
    return next((entry.value for entry in entries if entry.name == name), None)


class FormController:
    """State machine driving one form instance.

    The controller never holds field values: every pass re-reads the live
    controls through the injected form element and rebuilds the structured
    data from scratch.
    """

    def __init__(
        self,
        *,
        schema: Mapping[str, Any] | str,
        validator: Validator | ValidateFn,
        form: FormElement,
        options: FormOptions | None = None,
        on_change: ChangeCallback | None = None,
        on_submit: SubmitCallback | None = None,
        on_submit_invalid: SubmitInvalidCallback | None = None,
        schema_source: SchemaSource | None = None,
    ) -> None:
        """Initialize controller.

        Args:
            schema (Mapping[str, Any] | str): Inline schema, URL or absolute path.
            validator (Validator | ValidateFn): Validation capability.
            form (FormElement): Live control set.
            options (FormOptions | None): Behavior options, the configured defaults when omitted.
            on_change (ChangeCallback | None): Called with (data, changed) after each field change.
            on_submit (SubmitCallback | None): Commit side effect; native submit when absent.
            on_submit_invalid (SubmitInvalidCallback | None): Called with (errors, data) on invalid submit.
            schema_source (SchemaSource | None): Resolver for schema references.
        """
        ensure_schema_input(schema)
        self._schema_input = schema
        self._schema: Mapping[str, Any] | None = schema if isinstance(schema, Mapping) else None
        self._schema_generation = 0
        self._schema_source = schema_source or SchemaSource()
        self._validator = as_validator(validator)
        self._form = form
        self._options = options or FormOptions.from_settings(get_settings())
        self._on_change = on_change
        self._on_submit = on_submit
        self._on_submit_invalid = on_submit_invalid

        self._submitting = False
        self._dirty = False
        self._errors: list[Any] = []
        self._listeners: list[SnapshotListener] = []

    @property
    def schema(self) -> Mapping[str, Any] | None:
        """Return the resolved schema, ``None`` until resolved."""
        return self._schema

    @property
    def submitting(self) -> bool:
        """Return whether a commit side effect is in flight."""
        return self._submitting

    @property
    def phase(self) -> ControllerPhase:
        """Return the submit lifecycle phase."""
        return ControllerPhase.SUBMITTING if self._submitting else ControllerPhase.IDLE

    @property
    def dirty(self) -> bool:
        """Return whether a field changed since the last reset of the flag."""
        return self._dirty

    @property
    def errors(self) -> list[Any]:
        """Return errors from the last validation attempt."""
        return list(self._errors)

    @property
    def options(self) -> FormOptions:
        """Return behavior options."""
        return self._options

    @property
    def form(self) -> FormElement:
        """Return the underlying form element."""
        return self._form

    @property
    def handle(self) -> FormHandle:
        """Return the imperative handle for this form."""
        return FormHandle(
            submit=self.submit,
            validate=self.validate,
            reset=self.reset,
            reset_dirty=self.reset_dirty,
            form=self._form,
        )

    def snapshot(self) -> FormSnapshot:
        """Return the render-time view of the current state.

        Returns:
            FormSnapshot: Snapshot passed to whatever renders the form body.
        """
        return FormSnapshot(
            errors=list(self._errors),
            schema=dict(self._schema) if self._schema is not None else None,
            submitting=self._submitting,
            dirty=self._dirty,
            hidden_submit=self._options.hidden_submit,
            submit=self.submit,
            reset=self.reset,
            reset_dirty=self.reset_dirty,
        )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """Register a listener receiving a snapshot on every state change.

        Args:
            listener (SnapshotListener): Snapshot consumer.

        Returns:
            Callable[[], None]: Unsubscribe function.
        """
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def field_schema(self, name: str) -> Any:  # noqa: ANN401
        """Return the schema fragment governing a field.

        Args:
            name (str): Dotted/bracketed field name.

        Returns:
            Any: Fragment, or ``None`` when unresolved.
        """
        return resolve_field_schema(name, self._schema)

    async def load_schema(self) -> Mapping[str, Any] | None:
        """Resolve the current schema input.

        A resolution that completes after the input was replaced is discarded.

        Returns:
            Mapping[str, Any] | None: Current schema after resolution.
        """
        generation = self._schema_generation
        schema_input = self._schema_input
        schema = await self._schema_source.resolve(schema_input)

        if generation != self._schema_generation:
            logger.debug(
                "Discarding stale schema resolution",
                extra={"reference": _describe_schema_input(schema_input)},
            )
            return self._schema
        if schema is not None:
            self._set_state(schema=schema)
        return self._schema

    async def set_schema_input(self, schema_input: Mapping[str, Any] | str) -> Mapping[str, Any] | None:
        """Replace the schema input and resolve it.

        Args:
            schema_input (Mapping[str, Any] | str): Inline schema or reference.

        Returns:
            Mapping[str, Any] | None: Resolved schema, ``None`` when the fetch failed.
        """
        ensure_schema_input(schema_input)
        self._schema_generation += 1
        self._schema_input = schema_input
        self._set_state(schema=schema_input if isinstance(schema_input, Mapping) else None)
        return await self.load_schema()

    async def handle_change(self, event: ChangeEvent) -> None:
        """Handle a change bubbling from a control.

        Args:
            event (ChangeEvent): Change event.
        """
        self._set_state(dirty=True)
        target = event.target
        if target is None or not self._form.contains(target):
            return

        entries = self._form.entries()
        data = entries_to_nested_object(entries)
        name = str(getattr(target, "name", "") or "")
        changed = ChangeSet(name=name, value=_first_value(entries, name))

        if self._on_change is not None:
            await self._run_side_effect("on_change", self._on_change, data, changed)

        if self._should_revalidate():
            await self.validate()

    async def validate(self) -> ValidationOutcome:
        """Validate current field values against the resolved schema.

        Raises:
            ValidatorError: If the validator raises instead of returning errors.

        Returns:
            ValidationOutcome: Data and errors; empty without a schema.
        """
        schema = self._schema
        if schema is None:
            return ValidationOutcome()

        data = entries_to_nested_object(self._form.entries())
        try:
            errors = list(await resolve_awaitable(self._validator.validate(schema, data)))
        except Exception as exc:
            raise ValidatorError(exc=exc) from exc

        self._set_state(errors=errors)
        return ValidationOutcome(data=data, errors=errors)

    async def handle_submit(self, event: SubmitEvent | None = None) -> None:
        """Handle a submit action, preventing its native navigation.

        Args:
            event (SubmitEvent | None): Triggering submit event.
        """
        if event is not None:
            event.prevent_default()
        await self.submit()

    async def submit(self) -> None:
        """Validate, then commit or report invalid data."""
        if self._schema is None:
            logger.debug(
                "Submit ignored: schema not resolved",
                extra={"reference": _describe_schema_input(self._schema_input)},
            )
            return

        outcome = await self.validate()
        if outcome.errors:
            if self._on_submit_invalid is not None:
                await self._run_side_effect(
                    "on_submit_invalid",
                    self._on_submit_invalid,
                    outcome.errors,
                    outcome.data,
                )
            return

        self._set_state(submitting=True)
        try:
            if self._on_submit is None:
                await self._run_side_effect("native_submit", self._form.submit)
            else:
                committed = await self._run_side_effect("on_submit", self._on_submit, outcome.data)
                if committed and self._options.reset_on_submit:
                    self.reset()
        finally:
            self._set_state(submitting=False, dirty=False)

    def reset(self) -> None:
        """Revert controls to their defaults and clear errors."""
        self._form.reset()
        self._set_state(errors=[])

    def reset_dirty(self) -> None:
        """Clear the dirty flag."""
        self._set_state(dirty=False)

    def _should_revalidate(self) -> bool:
        if self._options.validation_mode == ValidationMode.CHANGE:
            return True
        return self._options.revalidate_on_error and bool(self._errors)

    async def _run_side_effect(self, label: str, callback: Callable[..., Any], *args: Any) -> bool:  # noqa: ANN401
        """Run an external callback, isolating its failure.

        Args:
            label (str): Callback name for diagnostics.
            callback (Callable[..., Any]): Sync or async callable.
            *args (Any): Callback arguments.

        Returns:
            bool: True when the callback completed without raising.
        """
        try:
            await resolve_awaitable(callback(*args))
        except Exception:
            logger.exception("Form side effect failed", extra={"callback": label})
            return False
        return True

    def _set_state(
        self,
        *,
        submitting: bool | None = None,
        dirty: bool | None = None,
        errors: list[Any] | None = None,
        schema: Mapping[str, Any] | None = _UNSET,
    ) -> None:
        changed = False
        if submitting is not None and submitting != self._submitting:
            self._submitting = submitting
            changed = True
        if dirty is not None and dirty != self._dirty:
            self._dirty = dirty
            changed = True
        if errors is not None and errors != self._errors:
            self._errors = errors
            changed = True
        if schema is not _UNSET and schema is not self._schema:
            self._schema = schema
            changed = True
        if changed:
            self._notify()

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Form listener failed")


def _describe_schema_input(schema_input: object) -> str:
    if is_schema_reference(schema_input):
        return str(schema_input)
    return "<inline>"
