"""Task and step models.

A Task is one end-to-end unit of orchestrated work; its Steps are the planned
tool invocations. Both are mutable for the duration of a single orchestrator
run and owned exclusively by it.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, ConfigDict, Field, field_validator

from taskpilot.core.models import MutableStrictBaseModel, StrictBaseModel


class TaskStatus(str, Enum):
    """Task and step status."""
    PENDING = "pending"
    PLANNING = "planning"
    EXECUTING = "executing"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in (TaskStatus.COMPLETED, TaskStatus.FAILED, TaskStatus.CANCELLED)


STEP_STATUSES = frozenset({
    TaskStatus.PENDING,
    TaskStatus.EXECUTING,
    TaskStatus.COMPLETED,
    TaskStatus.FAILED,
})


class TaskPriority(str, Enum):
    """Task priority."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class TaskInput(StrictBaseModel):
    """Validated task submission.

    Accepts enum values as plain strings and the camelCase aliases
    ``maxSteps``/``timeoutMs``; numeric bounds stay strict integers.
    """

    model_config = ConfigDict(strict=False)

    description: str = Field(..., description="What the task should accomplish")
    priority: TaskPriority = Field(default=TaskPriority.MEDIUM, description="Task priority")
    context: Optional[Dict[str, Any]] = Field(default=None, description="Free-form task context")
    max_steps: int = Field(
        default=10,
        gt=0,
        strict=True,
        validation_alias=AliasChoices("max_steps", "maxSteps"),
        description="Upper bound on planned steps",
    )
    timeout_ms: int = Field(
        default=60000,
        gt=0,
        strict=True,
        validation_alias=AliasChoices("timeout_ms", "timeoutMs"),
        description="Time budget for the task; enforced by the caller",
    )

    @field_validator('description')
    @classmethod
    def validate_description(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Task description is required")
        return v


class TaskStep(MutableStrictBaseModel):
    """One planned tool invocation."""

    id: str = Field(..., description="Step id, unique within its task")
    name: str = Field(..., description="Short step name")
    description: str = Field(default="", description="What this step accomplishes")
    tool_name: str = Field(..., description="Registered tool to invoke")
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Tool parameters, may hold $ references")
    status: TaskStatus = Field(default=TaskStatus.PENDING, description="Step status")
    result: Any = Field(default=None, description="Tool result payload")
    error: Optional[str] = Field(default=None, description="Failure message")
    started_at: Optional[datetime] = Field(default=None)
    completed_at: Optional[datetime] = Field(default=None)

    @field_validator('status')
    @classmethod
    def validate_status(cls, v: TaskStatus) -> TaskStatus:
        if v not in STEP_STATUSES:
            raise ValueError(f"Step status cannot be '{v.value}'")
        return v


class Task(MutableStrictBaseModel):
    """A submitted task and everything that happened to it."""

    id: str = Field(..., description="Unique task id")
    input: TaskInput = Field(..., description="Validated task input")
    status: TaskStatus = Field(default=TaskStatus.PENDING)
    steps: List[TaskStep] = Field(default_factory=list)
    result: Optional[Dict[str, Any]] = Field(default=None, description="Aggregated step results")
    error: Optional[str] = Field(default=None)
    created_at: datetime = Field(default_factory=datetime.now)
    started_at: Optional[datetime] = Field(default=None)
    completed_at: Optional[datetime] = Field(default=None)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def get_step(self, step_id: str) -> Optional[TaskStep]:
        for step in self.steps:
            if step.id == step_id:
                return step
        return None

    @property
    def completed_steps(self) -> List[TaskStep]:
        return [s for s in self.steps if s.status == TaskStatus.COMPLETED]

    @property
    def failed_step(self) -> Optional[TaskStep]:
        for step in self.steps:
            if step.status == TaskStatus.FAILED:
                return step
        return None
