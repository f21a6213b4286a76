"""Single-step execution.

The StepExecutor runs one TaskStep against the ToolRegistry: it resolves the
step's parameters, invokes the tool, records the outcome on the step and in
the ExecutionContext, and publishes step lifecycle events. It never raises;
every failure ends up as ``step.status == FAILED`` with ``step.error`` set.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, Optional

from taskpilot.core.events.events import EventBus, EventType
from taskpilot.utils.logging_config import log_step_event

from ..models import TaskStatus, TaskStep
from .models import ExecutionContext, ToolResult
from .registry import ToolRegistry
from .resolver import resolve_parameters

logger = logging.getLogger(__name__)

ParameterResolver = Callable[[Dict[str, Any], ExecutionContext], Dict[str, Any]]


class StepExecutor:
    """Executes task steps one at a time."""

    def __init__(
        self,
        registry: ToolRegistry,
        event_bus: Optional[EventBus] = None,
        resolver: ParameterResolver = resolve_parameters,
    ):
        self.registry = registry
        self.event_bus = event_bus or EventBus()
        self.resolver = resolver

    async def execute_step(self, step: TaskStep, context: ExecutionContext) -> None:
        """Run ``step`` and mutate it (and ``context``) in place.

        Args:
            step: Pending step to execute
            context: Execution context of the owning task
        """
        step.status = TaskStatus.EXECUTING
        step.started_at = datetime.now()
        await self._publish(EventType.STEP_STARTED, context.task_id, step, {"tool_name": step.tool_name})

        try:
            resolved = self.resolver(step.parameters, context)
            result = await self.registry.execute(step.tool_name, resolved)
        except Exception as e:
            logger.error(f"Step {step.id} raised during execution: {e}", exc_info=True)
            result = ToolResult(success=False, error=str(e) or e.__class__.__name__)

        try:
            context.record_step_result(step.id, result)
        except ValueError as e:
            result = ToolResult(success=False, error=str(e))

        step.completed_at = datetime.now()

        if result.success:
            step.status = TaskStatus.COMPLETED
            step.result = result.data
            await self._publish(
                EventType.STEP_COMPLETED,
                context.task_id,
                step,
                {"tool_name": step.tool_name, "result": result.data},
            )
        else:
            step.status = TaskStatus.FAILED
            step.error = result.error or "Tool execution failed"
            await self._publish(
                EventType.STEP_FAILED,
                context.task_id,
                step,
                {"tool_name": step.tool_name, "error": step.error},
            )

    async def _publish(
        self,
        event_type: EventType,
        task_id: str,
        step: TaskStep,
        data: Dict[str, Any],
    ) -> None:
        log_step_event(task_id, step.id, event_type.value, {"tool_name": step.tool_name})
        await self.event_bus.publish(event_type, task_id, {"step_id": step.id, **data})
