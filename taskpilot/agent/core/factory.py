"""Explicit wiring of the orchestration engine.

Nothing here is cached at module level: every call builds fresh objects, so
applications and tests can hold independent engines side by side.
"""

import logging
from typing import Optional

from taskpilot.agent.components.task.execution.registry import ToolRegistry
from taskpilot.agent.components.task.execution.tool_implementations import builtin_tools
from taskpilot.agent.components.task.planning.heuristic import HeuristicPlanner
from taskpilot.agent.components.task.planning.planner import LLMPlanner
from taskpilot.agent.core.orchestrator import TaskOrchestrator
from taskpilot.agent.core.resilience import CircuitBreaker
from taskpilot.core.events.events import EventBus
from taskpilot.core.settings.settings import TaskPilotSettings
from taskpilot.providers.llm.base import LLMClientInterface
from taskpilot.providers.llm.openai_chat.provider import OpenAIProvider

logger = logging.getLogger(__name__)


def create_default_registry() -> ToolRegistry:
    """Registry holding every built-in tool."""
    return ToolRegistry(builtin_tools)


def create_llm_client(settings: TaskPilotSettings) -> Optional[OpenAIProvider]:
    """OpenAI client for the configured model, or None without an API key."""
    if not settings.llm.configured:
        return None
    return OpenAIProvider(settings.llm, settings.resilience)


def create_orchestrator(
    settings: TaskPilotSettings,
    registry: Optional[ToolRegistry] = None,
    llm_client: Optional[LLMClientInterface] = None,
    use_llm: bool = True,
    event_bus: Optional[EventBus] = None,
) -> TaskOrchestrator:
    """Build a TaskOrchestrator from settings.

    Args:
        settings: Loaded settings
        registry: Tool registry (the built-in tools by default)
        llm_client: LLM client for planning (an OpenAIProvider when an API
            key is configured)
        use_llm: False plans with the heuristic planner only
        event_bus: Event bus to publish on

    Returns:
        Ready-to-use orchestrator
    """
    registry = registry if registry is not None else create_default_registry()
    fallback = HeuristicPlanner(settings.fallback_tool, settings.fallback_parameter)

    planner = None
    if use_llm:
        client_is_default = llm_client is None
        llm_client = llm_client or create_llm_client(settings)
        if llm_client is not None:
            breaker = CircuitBreaker(
                failure_threshold=settings.resilience.breaker_failure_threshold,
                reset_timeout=settings.resilience.reset_timeout,
                name="planner",
            )
            # The OpenAI provider retries on its own
            retry = None if client_is_default else settings.resilience
            planner = LLMPlanner(llm_client, breaker=breaker, retry=retry)
        else:
            logger.info("No LLM configured, planning with the heuristic planner")

    return TaskOrchestrator(registry, planner=planner, fallback_planner=fallback, event_bus=event_bus)
