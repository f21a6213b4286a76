"""Task planning.

PlannerInterface is the seam the orchestrator plans through. LLMPlanner
asks an LLM for a plan; HeuristicPlanner is the deterministic fallback.
"""

from .heuristic import HeuristicPlanner, match_tool
from .interfaces import PlannerInterface
from .models import PlannedStep, PlanningRequest, PlanningResult
from .planner import LLMPlanner

__all__ = [
    "HeuristicPlanner",
    "match_tool",
    "PlannerInterface",
    "PlannedStep",
    "PlanningRequest",
    "PlanningResult",
    "LLMPlanner",
]
