"""Shared pytest fixtures."""

from typing import List

import pytest

from taskpilot.agent.components.task.execution.registry import ToolRegistry
from taskpilot.agent.core.factory import create_default_registry
from taskpilot.core.events.events import AgentEvent, EventBus
from taskpilot.core.settings.settings import ResilienceSettings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep settings tests independent of the developer's environment and .env file."""
    for var in (
        "OPENAI_API_KEY",
        "OPENAI_MODEL",
        "OPENAI_BASE_URL",
        "LOG_LEVEL",
        "MAX_RETRIES",
        "RETRY_DELAY_MS",
        "TASKPILOT_FALLBACK_TOOL",
    ):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def registry() -> ToolRegistry:
    """Registry with the built-in tools."""
    return create_default_registry()


@pytest.fixture
def event_bus() -> EventBus:
    return EventBus()


@pytest.fixture
def recorded_events(event_bus) -> List[AgentEvent]:
    """Events published on ``event_bus``, in order."""
    events: List[AgentEvent] = []
    event_bus.subscribe(events.append)
    return events


@pytest.fixture
def fast_resilience() -> ResilienceSettings:
    """Resilience settings with millisecond delays."""
    return ResilienceSettings(
        max_retries=2,
        retry_delay_ms=1,
        max_retry_delay_ms=2,
        breaker_failure_threshold=3,
        breaker_reset_timeout_ms=1000,
    )
