"""LLM-backed task planner."""

import logging
from typing import Any, Dict, Optional

from pydantic import ValidationError

from taskpilot.agent.core.errors import PlanningError
from taskpilot.agent.core.resilience import CircuitBreaker, with_retry
from taskpilot.core.settings.settings import ResilienceSettings
from taskpilot.providers.llm.base import LLMClientInterface
from taskpilot.providers.llm.models import ChatMessage

from .models import PlanningRequest, PlanningResult
from .prompts import build_system_prompt, build_user_prompt

logger = logging.getLogger(__name__)


class LLMPlanner:
    """Asks an LLM for a JSON plan over the available tools.

    The LLM call is guarded by a circuit breaker; with ``retry`` settings it
    is additionally retried inside the breaker. Any failure, including a
    plan that names unknown tools, is raised as PlanningError.
    """

    def __init__(
        self,
        llm_client: LLMClientInterface,
        breaker: Optional[CircuitBreaker] = None,
        retry: Optional[ResilienceSettings] = None,
        name: str = "llm_planner",
    ):
        self.llm_client = llm_client
        self.breaker = breaker or CircuitBreaker(name=name)
        self.retry = retry
        self.name = name

    async def plan(self, request: PlanningRequest) -> PlanningResult:
        """Produce a plan for ``request``.

        Raises:
            PlanningError: If the LLM is unavailable or returns an unusable plan
        """
        messages = [
            ChatMessage.system(build_system_prompt(request)),
            ChatMessage.user(build_user_prompt(request)),
        ]

        try:
            raw = await self.breaker.execute(lambda: self._request_plan(messages))
        except Exception as e:
            raise PlanningError("LLM planning failed", planner_name=self.name, cause=e) from e

        result = self._parse_plan(raw)
        self._validate_tools(result, request)
        logger.info(f"LLM planner produced {len(result.steps)} steps: {result.reasoning}")
        return result

    async def _request_plan(self, messages) -> Dict[str, Any]:
        if self.retry is None:
            return await self.llm_client.complete_json(messages)
        return await with_retry(
            lambda: self.llm_client.complete_json(messages),
            retries=self.retry.max_retries,
            min_delay=self.retry.min_delay,
            max_delay=self.retry.max_delay,
            factor=self.retry.backoff_factor,
        )

    def _parse_plan(self, raw: Any) -> PlanningResult:
        if not isinstance(raw, dict):
            raise PlanningError(
                f"Planner response must be a JSON object, got {type(raw).__name__}",
                planner_name=self.name,
            )
        try:
            result = PlanningResult.model_validate(raw)
        except ValidationError as e:
            raise PlanningError("Planner response has invalid structure", planner_name=self.name, cause=e) from e

        if not result.steps:
            raise PlanningError("Planner returned no steps", planner_name=self.name)
        return result

    def _validate_tools(self, result: PlanningResult, request: PlanningRequest) -> None:
        available = set(request.tool_names)
        unknown = [s.tool_name for s in result.steps if s.tool_name not in available]
        if unknown:
            raise PlanningError(
                f"Plan references unknown tools: {', '.join(unknown)}",
                planner_name=self.name,
            )
