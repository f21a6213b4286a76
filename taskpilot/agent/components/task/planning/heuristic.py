"""Deterministic fallback planner.

Produces a single step. The first registered tool whose name, with
underscores read as spaces, occurs in the lower-cased description is chosen
and receives the task context as its parameters. Without a match the
configured fallback tool is used with the description as its only parameter.
"""

import logging
from typing import Iterable, Optional

from .models import PlannedStep, PlanningRequest, PlanningResult

logger = logging.getLogger(__name__)

DEFAULT_FALLBACK_TOOL = "analyze_text"
DEFAULT_FALLBACK_PARAMETER = "text"


def match_tool(description: str, tool_names: Iterable[str]) -> Optional[str]:
    """Return the first tool name mentioned in ``description``, or None."""
    haystack = description.lower()
    for name in tool_names:
        if name.replace("_", " ").lower() in haystack:
            return name
    return None


class HeuristicPlanner:
    """Substring-matching single-step planner.

    The fallback tool is planned even when the catalog does not list it, so
    it must be registered; otherwise the fallback step fails with
    "Tool '<name>' not found" and the task ends failed.
    """

    def __init__(
        self,
        fallback_tool: str = DEFAULT_FALLBACK_TOOL,
        fallback_parameter: str = DEFAULT_FALLBACK_PARAMETER,
    ):
        self.fallback_tool = fallback_tool
        self.fallback_parameter = fallback_parameter

    async def plan(self, request: PlanningRequest) -> PlanningResult:
        return self.build_plan(request)

    def build_plan(self, request: PlanningRequest) -> PlanningResult:
        """Synchronous planning; never raises."""
        matched = match_tool(request.description, request.tool_names)
        if matched:
            logger.debug(f"Heuristic planner matched tool '{matched}'")
            return PlanningResult(
                steps=[
                    PlannedStep(
                        name=f"Execute {matched}",
                        description=request.description,
                        tool_name=matched,
                        parameters=dict(request.context),
                    )
                ],
                reasoning=f"Task description mentions tool '{matched}'",
            )

        logger.debug(f"Heuristic planner found no match, using fallback tool '{self.fallback_tool}'")
        return PlanningResult(
            steps=[
                PlannedStep(
                    name="Analyze Input",
                    description="Analyze the task input for insights",
                    tool_name=self.fallback_tool,
                    parameters={self.fallback_parameter: request.description},
                )
            ],
            reasoning=f"No tool matched the task description; using fallback tool '{self.fallback_tool}'",
        )
