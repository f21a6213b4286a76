"""Task orchestration.

The TaskOrchestrator owns the task state machine::

    pending -> planning -> executing -> completed | failed

``execute`` validates the input, obtains a plan from the injected planner
(falling back to the heuristic planner on any planning failure), runs the
steps strictly in order through the StepExecutor and aggregates their
results. Apart from input validation, failures never escape ``execute``:
they are reported through the returned Task and the ``task:failed`` event.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from taskpilot.agent.components.task.execution.executor import StepExecutor
from taskpilot.agent.components.task.execution.models import ExecutionContext
from taskpilot.agent.components.task.execution.registry import ToolRegistry
from taskpilot.agent.components.task.models import Task, TaskInput, TaskStatus, TaskStep
from taskpilot.agent.components.task.planning.heuristic import HeuristicPlanner
from taskpilot.agent.components.task.planning.interfaces import PlannerInterface
from taskpilot.agent.components.task.planning.models import PlannedStep, PlanningRequest, PlanningResult
from taskpilot.agent.core.errors import PlanningError, TaskValidationError
from taskpilot.core.events.events import EventBus, EventHandler, EventType
from taskpilot.utils.ids import generate_id
from taskpilot.utils.logging_config import log_task_event

logger = logging.getLogger(__name__)


class TaskOrchestrator:
    """Plans and executes tasks against a tool registry.

    Args:
        registry: Tools available to plans
        planner: Primary planner; None plans with the fallback planner only
        fallback_planner: Used when the primary planner fails or is absent
        event_bus: Lifecycle event observers (a private bus by default)
        executor: Step executor (built from the registry by default)
    """

    def __init__(
        self,
        registry: ToolRegistry,
        planner: Optional[PlannerInterface] = None,
        fallback_planner: Optional[HeuristicPlanner] = None,
        event_bus: Optional[EventBus] = None,
        executor: Optional[StepExecutor] = None,
    ):
        self.registry = registry
        self.planner = planner
        self.fallback_planner = fallback_planner or HeuristicPlanner()
        self.event_bus = event_bus or EventBus()
        self.executor = executor or StepExecutor(registry, self.event_bus)

    def on_event(self, handler: EventHandler) -> Callable[[], None]:
        """Subscribe to lifecycle events; returns the unsubscribe callable."""
        return self.event_bus.subscribe(handler)

    async def execute(self, task_input: Union[TaskInput, Mapping[str, Any]]) -> Task:
        """Run a task end to end.

        Args:
            task_input: TaskInput or a mapping validated into one

        Returns:
            The finished Task, with status COMPLETED or FAILED

        Raises:
            TaskValidationError: If the input is invalid (no Task is created)
        """
        validated = self._validate_input(task_input)

        task = Task(id=generate_id("task"), input=validated)
        await self._emit(EventType.TASK_CREATED, task, {"input": validated.model_dump()})
        log_task_event(task.id, "created", {"description": validated.description})

        try:
            self.update_task_status(task, TaskStatus.PLANNING)
            task.started_at = datetime.now()
            await self._emit(EventType.TASK_STARTED, task)

            await self._emit(EventType.TASK_PLANNING, task)
            task.steps = await self._plan(task)
            task.metadata["planned_steps"] = len(task.steps)
            await self._emit(EventType.TASK_PLANNED, task, {"step_count": len(task.steps)})
            log_task_event(task.id, "planned", {"step_count": len(task.steps)})

            self.update_task_status(task, TaskStatus.EXECUTING)
            context = ExecutionContext(task_id=task.id)

            for step in task.steps:
                await self.executor.execute_step(step, context)
                if step.status == TaskStatus.FAILED:
                    task.error = step.error
                    self.update_task_status(task, TaskStatus.FAILED)
                    break

            if task.status == TaskStatus.EXECUTING:
                task.result = self.aggregate_results(task.steps)
                self.update_task_status(task, TaskStatus.COMPLETED)

        except Exception as e:
            logger.error(f"Task {task.id} failed: {e}", exc_info=True)
            task.error = str(e) or e.__class__.__name__
            task.status = TaskStatus.FAILED

        if task.started_at is None:
            task.started_at = datetime.now()
        task.completed_at = datetime.now()

        if task.status == TaskStatus.COMPLETED:
            await self._emit(EventType.TASK_COMPLETED, task, {"result": task.result})
            log_task_event(task.id, "completed")
        else:
            await self._emit(EventType.TASK_FAILED, task, {"error": task.error})
            log_task_event(task.id, "failed", {"error": task.error})

        return task

    def _validate_input(self, task_input: Union[TaskInput, Mapping[str, Any]]) -> TaskInput:
        if isinstance(task_input, TaskInput):
            return task_input
        try:
            return TaskInput.model_validate(task_input)
        except ValidationError as e:
            raise TaskValidationError.from_pydantic(e) from e

    async def _plan(self, task: Task) -> List[TaskStep]:
        catalog = self.registry.catalog()
        request = PlanningRequest(
            description=task.input.description,
            priority=task.input.priority,
            context=dict(task.input.context or {}),
            max_steps=task.input.max_steps,
            tools=catalog,
        )

        result: Optional[PlanningResult] = None
        if self.planner is not None and catalog:
            try:
                result = await self.planner.plan(request)
                if not result.steps:
                    raise PlanningError("Planner returned no steps")
            except Exception as e:
                logger.error(f"Planning failed for task {task.id}, falling back to heuristic plan: {e}")
                task.metadata["planning_error"] = str(e)
                result = None
        elif self.planner is not None:
            logger.warning("No tools registered, using heuristic plan")

        if result is None:
            result = await self.fallback_planner.plan(request)
            task.metadata["planner"] = "heuristic"
        else:
            task.metadata["planner"] = "primary"
        task.metadata["reasoning"] = result.reasoning

        planned = result.steps
        if not planned:
            raise PlanningError("No steps produced")
        if len(planned) > task.input.max_steps:
            logger.warning(
                f"Plan for task {task.id} has {len(planned)} steps, truncating to {task.input.max_steps}"
            )
            planned = planned[:task.input.max_steps]

        return [self._to_step(index, planned_step) for index, planned_step in enumerate(planned, start=1)]

    @staticmethod
    def _to_step(index: int, planned_step: PlannedStep) -> TaskStep:
        return TaskStep(
            id=f"step_{index}",
            name=planned_step.name or f"Step {index}",
            description=planned_step.description,
            tool_name=planned_step.tool_name,
            parameters=dict(planned_step.parameters),
        )

    @staticmethod
    def aggregate_results(steps: List[TaskStep]) -> Dict[str, Any]:
        """Map step id to ``{"name", "result"}`` for completed steps with a result."""
        return {
            step.id: {"name": step.name, "result": step.result}
            for step in steps
            if step.status == TaskStatus.COMPLETED and step.result is not None
        }

    @staticmethod
    def update_task_status(task: Task, status: TaskStatus) -> None:
        """Move a task forward in the state machine.

        Raises:
            ValueError: On a transition the state machine does not allow
        """
        allowed = _TRANSITIONS.get(task.status, ())
        if status not in allowed:
            raise ValueError(f"Invalid task transition {task.status.value} -> {status.value}")
        task.status = status

    async def _emit(self, event_type: EventType, task: Task, data: Optional[Dict[str, Any]] = None) -> None:
        await self.event_bus.publish(event_type, task.id, data)


_TRANSITIONS = {
    TaskStatus.PENDING: (TaskStatus.PLANNING, TaskStatus.FAILED),
    TaskStatus.PLANNING: (TaskStatus.EXECUTING, TaskStatus.FAILED),
    TaskStatus.EXECUTING: (TaskStatus.COMPLETED, TaskStatus.FAILED),
}
