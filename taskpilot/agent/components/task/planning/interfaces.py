"""Planner protocol."""

from typing import Protocol, runtime_checkable

from .models import PlanningRequest, PlanningResult


@runtime_checkable
class PlannerInterface(Protocol):
    """Turns a planning request into an ordered plan.

    Implementations may raise any exception; the orchestrator treats every
    failure as a signal to fall back to its heuristic planner.
    """

    async def plan(self, request: PlanningRequest) -> PlanningResult:
        ...
