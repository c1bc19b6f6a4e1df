"""Resilient HTTP client for the IcePanel REST API.

One logical call goes through ``IcePanelClient.execute``:

- builds the authenticated request against the validated base URL
- gives each attempt its own timeout window
- retries GET/HEAD on transport failures, 429 and 5xx with capped
  exponential backoff; writes run at most once
- honours a caller cancellation signal, which always beats retry
- raises a classified ``IcePanelError`` on failure, never user-facing text

Example:
    >>> async with IcePanelClient(settings) as client:
    ...     data = await client.execute(RequestDescriptor(path="/organizations/abc/landscapes"))
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Coroutine, Mapping
from typing import Annotated, Any, Literal, TypeVar

import httpx
import orjson
from pydantic import BaseModel, ConfigDict, Field, JsonValue, computed_field, field_validator

from icepanel_mcp.foundation.config import IcePanelSettings, get_settings
from icepanel_mcp.foundation.errors import IcePanelApiError, RequestCancelled, TransportError
from icepanel_mcp.runtime.observability import get_logger
from icepanel_mcp.runtime.retry import IDEMPOTENT_METHODS, RetryPolicy

from .params import QueryParams

logger = get_logger("client")

T = TypeVar("T")

HttpMethod = Literal["GET", "HEAD", "POST", "PATCH", "DELETE"]
ResponseType = Literal["json", "text"]
Sleeper = Callable[[float], Awaitable[None]]

_STANDARD_HEADERS: dict[str, str] = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


class RequestDescriptor(BaseModel):
    """One logical API operation.

    Attributes:
        path: Path relative to the base URL, starting with ``/``
        method: HTTP method (case-insensitive on input)
        body: JSON-serializable request body
        params: Ordered query pairs, usually from ``build_filter_params``
        headers: Extra headers merged over the standard ones
        cancel: Caller cancellation signal; setting it aborts without retry
        response_type: Parse success bodies as JSON or return raw text
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,  # asyncio.Event
        revalidate_instances="never",
    )

    path: Annotated[str, Field(min_length=1)]
    method: HttpMethod = "GET"
    body: JsonValue = Field(default=None, repr=False)
    params: QueryParams = ()
    headers: dict[str, str] = Field(default_factory=dict, repr=False)
    cancel: asyncio.Event | None = Field(default=None, exclude=True, repr=False)
    response_type: ResponseType = "json"

    @field_validator("method", mode="before")
    @classmethod
    def _upper_method(cls, v: object) -> object:
        return v.upper() if isinstance(v, str) else v

    @field_validator("path")
    @classmethod
    def _relative_path(cls, v: str) -> str:
        if not v.startswith("/") or v.startswith("//") or "://" in v:
            raise ValueError("path must be relative to the API base URL and start with '/'")
        return v

    @computed_field
    @property
    def is_idempotent(self) -> bool:
        return self.method in IDEMPOTENT_METHODS


class IcePanelClient:
    """Authenticated IcePanel API client with per-attempt timeouts and retries.

    Holds no per-call state: concurrent ``execute`` calls each own their
    timer, cancellation race and retry counter.

    Args:
        settings: Resolved configuration (default: ``get_settings()``)
        http: Injected ``httpx.AsyncClient``; when omitted one is created
            lazily and closed by ``aclose()``
        policy: Retry policy (default: derived from ``settings``)
        sleep: Backoff sleep, replaceable in tests

    Raises:
        ConfigurationError: The base URL is invalid; raised here, before any
            request is attempted.
    """

    __slots__ = ("_settings", "_base_url", "_policy", "_timeout", "_http", "_owns_http", "_sleep")

    def __init__(
        self,
        settings: IcePanelSettings | None = None,
        *,
        http: httpx.AsyncClient | None = None,
        policy: RetryPolicy | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._settings = settings or get_settings()
        self._base_url = self._settings.resolved_base_url()
        self._policy = policy or RetryPolicy.from_settings(self._settings)
        self._timeout = self._settings.timeout_seconds
        self._http = http
        self._owns_http = http is None
        self._sleep = sleep

    @property
    def settings(self) -> IcePanelSettings:
        return self._settings

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def policy(self) -> RetryPolicy:
        return self._policy

    # ─────────────────────────────────────────────────────────────────
    # Lifecycle
    # ─────────────────────────────────────────────────────────────────

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create the httpx async client."""
        if self._http is None:
            self._http = httpx.AsyncClient(timeout=self._timeout)
        return self._http

    async def aclose(self) -> None:
        """Close the httpx client if this instance created it."""
        if self._http is not None and self._owns_http:
            await self._http.aclose()
            self._http = None

    async def __aenter__(self) -> IcePanelClient:
        return self

    async def __aexit__(self, *exc: object) -> None:
        await self.aclose()

    # ─────────────────────────────────────────────────────────────────
    # Execution
    # ─────────────────────────────────────────────────────────────────

    def _build_headers(self, api_key: str, extra: Mapping[str, str]) -> httpx.Headers:
        headers = httpx.Headers({**_STANDARD_HEADERS, "Authorization": f"ApiKey {api_key}"})
        for key, value in extra.items():
            if value:  # an empty value must not strip a standard header
                headers[key] = value
        return headers

    async def execute(self, descriptor: RequestDescriptor) -> Any:
        """Perform one logical API operation.

        Returns:
            Parsed JSON (``{}`` for 204), or text for ``response_type="text"``.

        Raises:
            ConfigurationError: API key missing; nothing is sent.
            RequestCancelled: ``descriptor.cancel`` was set before or during the call.
            TransportError: Network failure or timeout on the last attempt.
            IcePanelApiError: Non-2xx response on the last attempt.
        """
        api_key = self._settings.require_api_key()
        url = f"{self._base_url}{descriptor.path}"
        headers = self._build_headers(api_key, descriptor.headers)
        content = orjson.dumps(descriptor.body) if descriptor.body is not None else None

        attempt = 0
        while True:
            _raise_if_cancelled(descriptor.cancel)
            logger.debug(
                "request",
                extra={"method": descriptor.method, "path": descriptor.path, "attempt": attempt + 1},
            )
            try:
                return await _race_cancel(
                    self._attempt(descriptor, url, headers, content), descriptor.cancel
                )
            except (TransportError, IcePanelApiError) as e:
                if not self._policy.should_retry(e, descriptor.method, attempt):
                    raise
                delay = self._policy.get_delay(attempt)
                logger.warning(
                    f"Retrying {descriptor.method} {descriptor.path} in {delay:.2f}s ({e})",
                    extra={"attempt": attempt + 1, "max_retries": self._policy.max_retries},
                )
                await _race_cancel(self._sleep(delay), descriptor.cancel)
                attempt += 1

    async def _attempt(
        self,
        descriptor: RequestDescriptor,
        url: str,
        headers: httpx.Headers,
        content: bytes | None,
    ) -> Any:
        """Single attempt under its own timeout window."""
        try:
            return await asyncio.wait_for(self._send(descriptor, url, headers, content), timeout=self._timeout)
        except asyncio.TimeoutError:
            raise TransportError(f"Request timed out after {self._timeout:g}s", timed_out=True) from None

    async def _send(
        self,
        descriptor: RequestDescriptor,
        url: str,
        headers: httpx.Headers,
        content: bytes | None,
    ) -> Any:
        client = self._get_client()
        try:
            response = await client.request(
                method=descriptor.method,
                url=url,
                headers=headers,
                params=descriptor.params or None,
                content=content,
                timeout=self._timeout,
            )
        except httpx.TimeoutException as e:
            raise TransportError(f"Request timed out after {self._timeout:g}s", timed_out=True) from e
        except httpx.TransportError as e:
            raise TransportError(f"Network error: {e}") from e
        return _parse_response(response, descriptor.method, descriptor.response_type)


def _parse_response(response: httpx.Response, method: HttpMethod, response_type: ResponseType) -> Any:
    if not response.is_success:
        raise _api_error(response)
    # HEAD, 204 and empty 2xx bodies carry nothing to parse
    if response.status_code == 204 or method == "HEAD" or not response.content:
        return "" if response_type == "text" else {}
    if response_type == "text":
        return response.text
    return response.json()


def _api_error(response: httpx.Response) -> IcePanelApiError:
    """Build the error for a non-2xx response; an unparseable body is kept as text."""
    raw = response.text
    try:
        body: Any = orjson.loads(raw)
    except ValueError:
        body = raw or None
    return IcePanelApiError(response.status_code, response.reason_phrase, body)


def _raise_if_cancelled(cancel: asyncio.Event | None) -> None:
    if cancel is not None and cancel.is_set():
        raise RequestCancelled()


async def _race_cancel(aw: Coroutine[Any, Any, T] | Awaitable[T], cancel: asyncio.Event | None) -> T:
    """Await ``aw`` unless ``cancel`` fires first; cancellation wins ties."""
    if cancel is None:
        return await aw
    work = asyncio.ensure_future(aw)
    waiter = asyncio.ensure_future(cancel.wait())
    try:
        await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
    finally:
        pending = [task for task in (work, waiter) if not task.done()]
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
    if cancel.is_set():
        if work.done() and not work.cancelled():
            work.exception()  # mark retrieved; the caller only sees the cancellation
        raise RequestCancelled()
    return work.result()


__all__ = [
    "HttpMethod",
    "IcePanelClient",
    "RequestDescriptor",
    "ResponseType",
]
