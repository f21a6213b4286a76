"""Task management.

Architecture:
- task/models.py: Task, TaskStep and TaskInput
- task/planning/: planners producing ordered steps
- task/execution/: tool registry, parameter resolution and step execution
"""

from .models import STEP_STATUSES, Task, TaskInput, TaskPriority, TaskStatus, TaskStep

__all__ = [
    "STEP_STATUSES",
    "Task",
    "TaskInput",
    "TaskPriority",
    "TaskStatus",
    "TaskStep",
]
