"""TaskPilot: task orchestration engine.

Turns a task description into an ordered plan of tool invocations, executes
the plan step by step with ``$`` references between step results, and
reports progress through lifecycle events. LLM calls are protected by
retries with exponential backoff and a circuit breaker.

Example:
    settings = load_settings()
    orchestrator = create_orchestrator(settings)
    task = await orchestrator.execute({"description": "analyze text of this sentence"})
"""

from taskpilot.agent.components.task.execution import ToolRegistry, ToolResult, param, tool
from taskpilot.agent.components.task.models import Task, TaskInput, TaskPriority, TaskStatus
from taskpilot.agent.core.errors import AgentError, TaskValidationError
from taskpilot.agent.core.factory import create_default_registry, create_orchestrator
from taskpilot.agent.core.orchestrator import TaskOrchestrator
from taskpilot.core.events.events import AgentEvent, EventBus, EventType
from taskpilot.core.settings.settings import TaskPilotSettings, load_settings

__version__ = "0.1.0"

__all__ = [
    "ToolRegistry",
    "ToolResult",
    "param",
    "tool",
    "Task",
    "TaskInput",
    "TaskPriority",
    "TaskStatus",
    "AgentError",
    "TaskValidationError",
    "create_default_registry",
    "create_orchestrator",
    "TaskOrchestrator",
    "AgentEvent",
    "EventBus",
    "EventType",
    "TaskPilotSettings",
    "load_settings",
    "__version__",
]
