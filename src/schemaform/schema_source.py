"""Schema resolution with a process-wide reference cache."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from schemaform import logger
from schemaform.exceptions import SchemaFetchError, SchemaSourceError
from schemaform.settings import Settings, build_httpx_client_kwargs, get_settings
from schemaform.typing.models import JSON_SCHEMA_ADAPTER

if TYPE_CHECKING:
    from schemaform.typing.models import JsonSchema
    from schemaform.typing.protocol import SchemaFetcher

_URL_PREFIXES = ("http://", "https://")


class SchemaCache(BaseModel):
    """In-memory schema cache keyed by reference.

    Entries are only added after a successful fetch and are never evicted by
    the controller.
    """

    model_config = ConfigDict(extra="forbid")

    entries: dict[str, dict[str, Any]] = Field(default_factory=dict, description="Resolved schemas.")

    def get(self, reference: str) -> JsonSchema | None:
        """Return the cached schema for a reference.

        Args:
            reference (str): Schema reference.

        Returns:
            JsonSchema | None: Cached schema, if any.
        """
        return self.entries.get(reference)

    def set(self, reference: str, schema: JsonSchema) -> None:
        """Store a resolved schema.

        Args:
            reference (str): Schema reference.
            schema (JsonSchema): Resolved schema.
        """
        self.entries[reference] = schema

    def clear(self) -> None:
        """Drop every cached entry."""
        self.entries.clear()

    def __contains__(self, reference: object) -> bool:
        """Return whether a reference is cached."""
        return reference in self.entries

    def __len__(self) -> int:
        """Return the number of cached references."""
        return len(self.entries)


_PROCESS_SCHEMA_CACHE = SchemaCache()


def get_schema_cache() -> SchemaCache:
    """Return the cache shared by every form in the process.

    Returns:
        SchemaCache: Process-wide cache.
    """
    return _PROCESS_SCHEMA_CACHE


def is_schema_reference(schema_input: object) -> bool:
    """Return whether a schema input is a fetchable reference.

    Args:
        schema_input (object): Inline schema or reference.

    Returns:
        bool: True for `http(s)://` URLs and absolute paths.
    """
    return isinstance(schema_input, str) and (schema_input.startswith(_URL_PREFIXES) or schema_input.startswith("/"))


def ensure_schema_input(schema_input: object) -> None:
    """Reject schema inputs that are neither mappings nor references.

    Args:
        schema_input (object): Candidate schema input.

    Raises:
        SchemaSourceError: If the input is unsupported.
    """
    if isinstance(schema_input, Mapping) or is_schema_reference(schema_input):
        return
    raise SchemaSourceError(
        message=f"Schema must be a mapping, an http(s) URL or an absolute path, got: {schema_input!r}",
    )


def _parse_schema_document(reference: str, raw: str | bytes) -> JsonSchema:
    """Decode a schema document.

    Args:
        reference (str): Reference the document was read from.
        raw (str | bytes): Raw JSON text.

    Raises:
        SchemaFetchError: If the document is not a JSON object.

    Returns:
        JsonSchema: Parsed schema.
    """
    try:
        return JSON_SCHEMA_ADAPTER.validate_json(raw)
    except ValidationError as exc:
        raise SchemaFetchError(reference=reference, message="Schema document is not a JSON object") from exc


class HttpSchemaFetcher:
    """Fetch referenced schemas over HTTP, or from disk for bare absolute paths."""

    def __init__(self, settings: Settings | None = None, *, client: httpx.AsyncClient | None = None) -> None:
        """Initialize fetcher.

        Args:
            settings (Settings | None): Runtime settings, defaults to `get_settings()`.
            client (httpx.AsyncClient | None): Shared client; a short-lived one is built per fetch otherwise.
        """
        self._settings = settings or get_settings()
        self._client = client

    def target_url(self, reference: str) -> str | None:
        """Return the URL to GET for a reference.

        Args:
            reference (str): URL or absolute path.

        Returns:
            str | None: Target URL, ``None`` when the path is read from disk.
        """
        if reference.startswith(_URL_PREFIXES):
            return reference
        if self._settings.schema_base_url:
            return f"{self._settings.schema_base_url}{reference}"
        return None

    async def fetch(self, reference: str) -> JsonSchema:
        """Fetch and parse a schema document.

        Args:
            reference (str): URL or absolute path.

        Raises:
            SchemaFetchError: If the client cannot be built, the request fails, or the response
                is not a successful JSON object.

        Returns:
            JsonSchema: Parsed schema.
        """
        url = self.target_url(reference)
        if url is None:
            return self._read_file(reference)

        try:
            if self._client is not None:
                response = await self._client.get(url)
            else:
                async with httpx.AsyncClient(**build_httpx_client_kwargs(self._settings)) as client:
                    response = await client.get(url)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise SchemaFetchError(reference=reference, message=f"Schema request failed: {exc}") from exc
        except OSError as exc:
            # ssl.SSLError and a missing CERT_PATH both surface here.
            raise SchemaFetchError(reference=reference, message=f"Schema client setup failed: {exc}") from exc

        if not response.is_success:
            raise SchemaFetchError(
                reference=reference,
                message="Schema request failed",
                status_code=response.status_code,
            )
        return _parse_schema_document(reference, response.content)

    @staticmethod
    def _read_file(reference: str) -> JsonSchema:
        path = Path(reference)
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise SchemaFetchError(reference=reference, message=f"Schema file is not readable: {exc}") from exc
        return _parse_schema_document(reference, raw)


class SchemaSource:
    """Resolve inline schemas and cached/fetched schema references."""

    def __init__(
        self,
        *,
        cache: SchemaCache | None = None,
        fetcher: SchemaFetcher | None = None,
        settings: Settings | None = None,
    ) -> None:
        """Initialize schema source.

        Args:
            cache (SchemaCache | None): Cache to use, the process-wide cache by default.
            fetcher (SchemaFetcher | None): Transport, `HttpSchemaFetcher` by default.
            settings (Settings | None): Settings for the default fetcher.
        """
        self._cache = cache if cache is not None else get_schema_cache()
        self._fetcher = fetcher if fetcher is not None else HttpSchemaFetcher(settings)

    @property
    def cache(self) -> SchemaCache:
        """Return the cache backing this source."""
        return self._cache

    async def resolve(self, schema_input: Mapping[str, Any] | str) -> Mapping[str, Any] | None:
        """Resolve a schema input to a concrete schema.

        Args:
            schema_input (Mapping[str, Any] | str): Inline schema or reference.

        Returns:
            Mapping[str, Any] | None: Schema, or ``None`` when the fetch failed.
        """
        ensure_schema_input(schema_input)
        if isinstance(schema_input, Mapping):
            return schema_input

        cached = self._cache.get(schema_input)
        if cached is not None:
            logger.debug("Schema cache hit", extra={"reference": schema_input})
            return cached

        try:
            schema = await self._fetcher.fetch(schema_input)
        except SchemaFetchError as exc:
            logger.warning("Schema fetch failed", extra={"reference": schema_input, "error": str(exc)})
            return None

        self._cache.set(schema_input, schema)
        logger.info("Schema cached", extra={"reference": schema_input})
        return schema
