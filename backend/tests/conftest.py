"""Shared fixtures: a scripted transport and a three-model roster."""

import asyncio
from dataclasses import dataclass
from typing import Any, Optional

import pytest

from launchpact.llm import (
    FallbackOrchestrator,
    GatewayConfig,
    ModelDescriptor,
    ProviderResponse,
    ProviderRoster,
)


@dataclass
class Scripted:
    """What the fake provider does when called."""

    response: Optional[ProviderResponse] = None
    error: Optional[BaseException] = None
    delay: float = 0.0
    # Time spent cleaning up after being cancelled
    teardown: float = 0.0


def ok(content: str) -> Scripted:
    return Scripted(response=ProviderResponse(status_code=200, content=content))


def status(code: int, text: str = "") -> Scripted:
    return Scripted(response=ProviderResponse(status_code=code, error_text=text))


def hang() -> Scripted:
    return Scripted(response=ProviderResponse(status_code=200, content="{}"), delay=60.0)


class ScriptedTransport:
    """ChatTransport fake keyed by model id.

    Records every wire request and every call that was cancelled while
    in flight.
    """

    def __init__(self, script: dict[str, Scripted]):
        self.script = script
        self.calls: list[dict[str, Any]] = []
        self.cancelled: list[str] = []

    @property
    def called_models(self) -> list[str]:
        return [c["model"] for c in self.calls]

    async def complete(self, wire_request: dict[str, Any]) -> ProviderResponse:
        self.calls.append(wire_request)
        model = wire_request["model"]
        step = self.script.get(model, status(500, "unscripted model"))
        try:
            if step.delay:
                await asyncio.sleep(step.delay)
        except asyncio.CancelledError:
            self.cancelled.append(model)
            if step.teardown:
                await asyncio.sleep(step.teardown)
            raise
        if step.error is not None:
            raise step.error
        return step.response


class RecordingSleep:
    """Stands in for asyncio.sleep so backoff does not slow the tests."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def roster():
    return ProviderRoster(
        [
            ModelDescriptor("fast-free", tier=1),
            ModelDescriptor("mid-free", tier=2),
            ModelDescriptor("paid-fallback", tier=3, supports_strict_json_mode=True),
        ]
    )


@pytest.fixture
def sleeper():
    return RecordingSleep()


@pytest.fixture
def make_orchestrator(roster, sleeper):
    """Build an orchestrator over the test roster with a scripted transport."""

    def build(script: dict[str, Scripted], attempt_timeout: float = 0.2):
        transport = ScriptedTransport(script)
        config = GatewayConfig(
            api_key="test-key",
            attempt_timeout_seconds=attempt_timeout,
            rate_limit_backoff_seconds=2.0,
            roster=roster,
        )
        return FallbackOrchestrator(config, transport=transport, sleep=sleeper), transport

    return build
