"""CLI entry point for SchemaForm."""

from __future__ import annotations

import argparse
import json
from pathlib import Path
from typing import TYPE_CHECKING, Any

from schemaform import __version__, logger
from schemaform.async_runner import run_async
from schemaform.controller import FormController
from schemaform.controls import Control, build_form
from schemaform.exceptions import PackageError, SchemaFetchError
from schemaform.logging import configure_logging
from schemaform.processing import entries_to_nested_object
from schemaform.schema_source import HttpSchemaFetcher, SchemaSource
from schemaform.settings import get_settings
from schemaform.typing.models import JSON_SCHEMA_ADAPTER, FormOptions
from schemaform.validators import JsonSchemaValidator

if TYPE_CHECKING:
    from collections.abc import Mapping, Sequence

    from schemaform.settings import Settings
    from schemaform.typing.models import ValidationOutcome

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INVALID = 2


def _split_assignment(value: str) -> tuple[str, str]:
    """Split a `NAME=VALUE` CLI argument.

    Args:
        value (str): Raw argument.

    Raises:
        argparse.ArgumentTypeError: If no `=` separates name and value.

    Returns:
        tuple[str, str]: Field name and raw value.
    """
    name, separator, raw = value.partition("=")
    if not separator or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got '{value}'")
    return name, raw


def _text_control(value: str) -> Control:
    name, raw = _split_assignment(value)
    return Control(name=name, type="text", value=raw)


def _number_control(value: str) -> Control:
    name, raw = _split_assignment(value)
    return Control(name=name, type="number", value=raw)


def _checkbox_control(value: str) -> Control:
    return Control(name=value, type="checkbox", checked=True)


def _add_field_arguments(parser: argparse.ArgumentParser) -> None:
    """Register field options sharing one ordered destination.

    Args:
        parser (argparse.ArgumentParser): Subcommand parser.
    """
    parser.add_argument("--field", action="append", type=_text_control, dest="controls", metavar="NAME=VALUE")
    parser.add_argument("--number", action="append", type=_number_control, dest="controls", metavar="NAME=VALUE")
    parser.add_argument("--checkbox", action="append", type=_checkbox_control, dest="controls", metavar="NAME")


def build_parser() -> argparse.ArgumentParser:
    """Create the command-line parser.

    Returns:
        argparse.ArgumentParser: The configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="schemaform")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")

    subparsers = parser.add_subparsers(dest="command")

    flatten_parser = subparsers.add_parser("flatten", help="Build nested data from flat field values")
    _add_field_arguments(flatten_parser)

    validate_parser = subparsers.add_parser("validate", help="Validate flat field values against a JSON Schema")
    validate_parser.add_argument("--schema", required=True, dest="schema", help="Schema URL or JSON file")
    _add_field_arguments(validate_parser)

    field_parser = subparsers.add_parser("field-schema", help="Show the schema fragment governing a field")
    field_parser.add_argument("--schema", required=True, dest="schema", help="Schema URL or JSON file")
    field_parser.add_argument("name")

    return parser


def _schema_input(value: str) -> Mapping[str, Any] | str:
    """Turn the `--schema` argument into a controller schema input.

    Args:
        value (str): URL or local JSON file path.

    Raises:
        SchemaFetchError: If the local file cannot be read or parsed.

    Returns:
        Mapping[str, Any] | str: URL reference or inline schema.
    """
    if value.startswith(("http://", "https://")):
        return value
    path = Path(value)
    try:
        return JSON_SCHEMA_ADAPTER.validate_json(path.read_bytes())
    except (OSError, ValueError) as exc:
        raise SchemaFetchError(reference=value, message=f"Cannot load schema file: {exc}") from exc


def _build_controller(args: argparse.Namespace, settings: Settings) -> FormController:
    """Build a controller over the CLI-provided controls.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Returns:
        FormController: Controller bound to an in-memory form.
    """
    return FormController(
        schema=_schema_input(args.schema),
        validator=JsonSchemaValidator(),
        form=build_form(getattr(args, "controls", None) or []),
        options=FormOptions.from_settings(settings),
        schema_source=SchemaSource(fetcher=HttpSchemaFetcher(settings)),
    )


async def _validate(controller: FormController, reference: str) -> ValidationOutcome:
    """Resolve the schema and validate the current fields.

    Args:
        controller (FormController): Controller to drive.
        reference (str): Schema argument, for error reporting.

    Raises:
        SchemaFetchError: If the schema could not be resolved.

    Returns:
        ValidationOutcome: Data and errors.
    """
    schema = await controller.load_schema()
    if schema is None:
        raise SchemaFetchError(reference=reference, message="Schema unavailable")
    return await controller.validate()


async def _field_schema(controller: FormController, name: str) -> Any:  # noqa: ANN401
    await controller.load_schema()
    return controller.field_schema(name)


def _print_json(payload: object) -> None:
    print(json.dumps(payload, indent=2, sort_keys=True))  # noqa: T201


def _run_command(args: argparse.Namespace, settings: Settings) -> int:
    """Dispatch a parsed subcommand.

    Args:
        args (argparse.Namespace): Parsed CLI args.
        settings (Settings): Runtime settings.

    Returns:
        int: Exit code.
    """
    if args.command == "flatten":
        controls = args.controls or []
        _print_json(entries_to_nested_object(build_form(controls).entries()))
        return EXIT_OK

    controller = _build_controller(args, settings)
    if args.command == "field-schema":
        _print_json(run_async(_field_schema(controller, args.name)))
        return EXIT_OK

    outcome = run_async(_validate(controller, args.schema))
    _print_json(outcome.model_dump(mode="json"))
    return EXIT_OK if outcome.is_valid else EXIT_INVALID


def main(argv: Sequence[str] | None = None) -> int:
    """Run the CLI.

    Args:
        argv (Sequence[str] | None): Arguments, `sys.argv[1:]` by default.

    Returns:
        int: Exit code (0 valid, 1 error, 2 invalid data).
    """
    settings = get_settings()
    configure_logging(settings=settings)

    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    try:
        return _run_command(args, settings)
    except PackageError:
        logger.exception("Command failed", extra={"command": args.command})
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.info("Command aborted by user")
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
