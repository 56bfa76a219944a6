from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx

from schemaform.controller import FormController
from schemaform.controls import Control, InMemoryForm
from schemaform.schema_source import HttpSchemaFetcher, SchemaSource, get_schema_cache
from schemaform.settings import Settings
from schemaform.typing.enums import ValidationMode
from schemaform.typing.models import FormOptions, SubmitEvent
from schemaform.validators import JsonSchemaValidator

SIGNUP_SCHEMA = {
    "type": "object",
    "properties": {
        "email": {"type": "string", "minLength": 3},
        "profile": {
            "type": "object",
            "properties": {
                "age": {"type": "integer", "minimum": 18},
                "newsletter": {"type": "boolean"},
            },
            "required": ["age"],
        },
    },
    "required": ["email", "profile"],
}


def _mock_client(requests: list[str]) -> httpx.AsyncClient:
    def _handler(request: httpx.Request) -> httpx.Response:
        requests.append(str(request.url))
        return httpx.Response(200, content=json.dumps(SIGNUP_SCHEMA).encode())

    return httpx.AsyncClient(transport=httpx.MockTransport(_handler))


def _signup_form() -> tuple[InMemoryForm, Control, Control, Control]:
    email = Control(name="email", type="email")
    age = Control(name="profile[age]", type="number")
    newsletter = Control(name="profile.newsletter", type="checkbox")
    return InMemoryForm().add(email, age, newsletter), email, age, newsletter


def test_signup_flow_from_remote_schema_to_commit() -> None:
    async def _scenario() -> tuple[list[str], list[dict[str, Any]], list[Any], FormController, InMemoryForm]:
        requests: list[str] = []
        committed: list[dict[str, Any]] = []
        rejected: list[Any] = []
        settings = Settings(schema_base_url="https://forms.example.test")

        async with _mock_client(requests) as client:
            source = SchemaSource(fetcher=HttpSchemaFetcher(settings, client=client))
            form, email, age, newsletter = _signup_form()
            controller = FormController(
                schema="/schemas/signup.json",
                validator=JsonSchemaValidator(),
                form=form,
                options=FormOptions(reset_on_submit=True),
                on_submit=committed.append,
                on_submit_invalid=lambda errors, data: rejected.append(errors),
                schema_source=source,
            )
            await controller.load_schema()

            await controller.handle_change(form.change(age, value="16"))
            await controller.handle_submit(SubmitEvent())
            assert {issue.keyword for issue in rejected[0]} == {"required", "minimum"}

            await controller.handle_change(form.change(email, value="ada@example.test"))
            await controller.handle_change(form.change(age, value="36"))
            await controller.handle_change(form.change(newsletter, checked=True))
            assert controller.errors == []

            await controller.handle_submit(SubmitEvent())
            return requests, committed, rejected, controller, form

    requests, committed, rejected, controller, form = asyncio.run(_scenario())

    assert requests == ["https://forms.example.test/schemas/signup.json"]
    assert len(rejected) == 1
    assert committed == [{"email": "ada@example.test", "profile": {"age": 36, "newsletter": True}}]
    assert controller.dirty is False
    assert controller.submitting is False
    assert form.entries() == []
    assert "/schemas/signup.json" in get_schema_cache()


def test_forms_sharing_a_reference_fetch_it_once() -> None:
    async def _scenario() -> list[str]:
        requests: list[str] = []
        async with _mock_client(requests) as client:
            fetcher = HttpSchemaFetcher(Settings(), client=client)
            for _ in range(2):
                form, _, _, _ = _signup_form()
                controller = FormController(
                    schema="https://forms.example.test/signup.json",
                    validator=JsonSchemaValidator(),
                    form=form,
                    schema_source=SchemaSource(fetcher=fetcher),
                )
                assert await controller.load_schema() == SIGNUP_SCHEMA
        return requests

    assert asyncio.run(_scenario()) == ["https://forms.example.test/signup.json"]


def test_change_mode_reports_type_errors_from_raw_text() -> None:
    form, email, age, _ = _signup_form()
    age.type = "text"
    controller = FormController(
        schema=SIGNUP_SCHEMA,
        validator=JsonSchemaValidator(),
        form=form,
        options=FormOptions(validation_mode=ValidationMode.CHANGE),
    )

    asyncio.run(controller.handle_change(form.change(email, value="ada@example.test")))
    asyncio.run(controller.handle_change(form.change(age, value="36")))

    assert [issue.path for issue in controller.errors] == ["profile.age"]
    assert controller.errors[0].keyword == "type"
