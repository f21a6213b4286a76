"""Tool execution system.

Architecture:
- ToolRegistry: name -> ToolDefinition mapping; validates and runs tool calls
- resolve_parameters: substitutes ``$`` variable references from the ExecutionContext
- StepExecutor: runs one TaskStep and publishes step events
- @tool decorator: declares a function as a ToolDefinition

Usage:
    from taskpilot.agent.components.task.execution import ToolRegistry
    from taskpilot.agent.components.task.execution.tool_implementations import builtin_tools

    registry = ToolRegistry(builtin_tools)
    result = await registry.execute("analyze_text", {"text": "Hello world."})
"""

from .decorators import param, tool
from .executor import StepExecutor
from .models import (
    ExecutionContext,
    ParameterType,
    ParamMap,
    ParamValue,
    ToolCatalogEntry,
    ToolDefinition,
    ToolParameter,
    ToolResult,
    step_result_key,
)
from .registry import ToolRegistry
from .resolver import VARIABLE_SIGIL, resolve_parameters

__all__ = [
    "tool",
    "param",
    "StepExecutor",
    "ExecutionContext",
    "ParameterType",
    "ParamMap",
    "ParamValue",
    "ToolCatalogEntry",
    "ToolDefinition",
    "ToolParameter",
    "ToolResult",
    "step_result_key",
    "ToolRegistry",
    "VARIABLE_SIGIL",
    "resolve_parameters",
]
