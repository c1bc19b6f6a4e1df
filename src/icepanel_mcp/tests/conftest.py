"""Shared fixtures: isolated environment, scripted transports, recorded sleeps."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

import httpx
import pytest

from icepanel_mcp.client import IcePanelClient
from icepanel_mcp.foundation.config import IcePanelSettings, clear_settings_cache

ENV_VARS = (
    "API_KEY",
    "ICEPANEL_API_KEY",
    "ORGANIZATION_ID",
    "ICEPANEL_ORGANIZATION_ID",
    "ICEPANEL_API_BASE_URL",
    "ICEPANEL_API_ALLOW_INSECURE",
    "ICEPANEL_API_TIMEOUT_MS",
    "ICEPANEL_API_MAX_RETRIES",
    "ICEPANEL_API_RETRY_BASE_DELAY_MS",
    "ICEPANEL_LOG_LEVEL",
    "ICEPANEL_LOG_FORMAT",
    "ICEPANEL_LOGGING",
)

Step = httpx.Response | type[httpx.TransportError] | Callable[[httpx.Request], Awaitable[httpx.Response]]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> object:
    """No ambient configuration leaks into a test, including a stray .env."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    clear_settings_cache()
    yield
    clear_settings_cache()


class Script:
    """MockTransport handler replaying steps in order; the last step repeats.

    A step is a response, a transport error class to raise, or an async
    callable producing the response.
    """

    def __init__(self, *steps: Step) -> None:
        self.steps = list(steps)
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        step = self.steps[min(len(self.requests), len(self.steps)) - 1]
        if isinstance(step, httpx.Response):
            # Fresh copy per attempt so a repeated step is never re-read
            return httpx.Response(step.status_code, headers=step.headers, content=step.content)
        if isinstance(step, type) and issubclass(step, httpx.TransportError):
            raise step("simulated failure", request=request)
        return await step(request)

    @property
    def calls(self) -> int:
        return len(self.requests)


class FakeSleep:
    """Records backoff delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def make_settings() -> Callable[..., IcePanelSettings]:
    def factory(**overrides: Any) -> IcePanelSettings:
        values: dict[str, Any] = {"api_key": "test-key", "organization_id": "org123"}
        values.update(overrides)
        return IcePanelSettings(_env_file=None, **values)
    return factory


@pytest.fixture
def script() -> type[Script]:
    return Script


@pytest.fixture
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture
def make_client(
    make_settings: Callable[..., IcePanelSettings], fake_sleep: FakeSleep
) -> Callable[..., IcePanelClient]:
    """Build a client whose network is ``script`` and whose sleeps are recorded."""
    def factory(script: Script, **overrides: Any) -> IcePanelClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(script))
        return IcePanelClient(make_settings(**overrides), http=http, sleep=fake_sleep)
    return factory
