"""Models exchanged with planners.

A planner receives a PlanningRequest (the task input plus the tool catalog)
and answers with a PlanningResult: an ordered list of PlannedSteps and the
reasoning behind them.
"""

from typing import Any, Dict, List

from pydantic import AliasChoices, ConfigDict, Field, field_validator

from taskpilot.core.models import StrictBaseModel

from ..execution.models import ToolCatalogEntry
from ..models import TaskPriority


class PlannedStep(StrictBaseModel):
    """A step as proposed by a planner, before it becomes a TaskStep.

    Planner output is external data, so types are coerced, unknown fields
    are ignored and ``toolName`` is accepted as an alias.
    """

    model_config = ConfigDict(strict=False, extra="ignore")

    name: str = Field(default="", description="Short step name")
    description: str = Field(default="", description="What the step accomplishes")
    tool_name: str = Field(
        ...,
        validation_alias=AliasChoices("tool_name", "toolName", "tool"),
        description="Registered tool to invoke",
    )
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Tool parameters")

    @field_validator('tool_name')
    @classmethod
    def validate_tool_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Step tool name must not be empty")
        return v.strip()


class PlanningResult(StrictBaseModel):
    """Ordered plan plus the planner's reasoning."""

    model_config = ConfigDict(strict=False, extra="ignore")

    steps: List[PlannedStep] = Field(default_factory=list, description="Steps in execution order")
    reasoning: str = Field(default="", description="Why this plan was chosen")


class PlanningRequest(StrictBaseModel):
    """Everything a planner may look at."""

    description: str
    priority: TaskPriority = TaskPriority.MEDIUM
    context: Dict[str, Any] = Field(default_factory=dict)
    max_steps: int = 10
    tools: List[ToolCatalogEntry] = Field(default_factory=list)

    @property
    def tool_names(self) -> List[str]:
        return [t.name for t in self.tools]
