"""Tool decorator.

Turns a plain (async or sync) function taking the parameter map into a
ToolDefinition. The decorator does not register anything: definitions are
handed to a ToolRegistry explicitly.
"""

import logging
from typing import Callable, Optional, Sequence, Union

from .models import ParameterType, ToolCallable, ToolDefinition, ToolParameter

logger = logging.getLogger(__name__)


def param(
    name: str,
    type: Union[ParameterType, str],
    description: str = "",
    required: bool = False,
    default: object = None,
) -> ToolParameter:
    """Shorthand for declaring a ToolParameter."""
    return ToolParameter(
        name=name,
        type=ParameterType(type),
        description=description,
        required=required,
        default=default,
    )


def tool(
    *,
    name: Optional[str] = None,
    description: Optional[str] = None,
    parameters: Sequence[ToolParameter] = (),
) -> Callable[[ToolCallable], ToolDefinition]:
    """Declare a function as a tool.

    Args:
        name: Tool name (defaults to the function name)
        description: Tool description (defaults to the first docstring line)
        parameters: Declared parameters, in order

    Example:
        @tool(
            name="shout",
            parameters=[param("text", "string", "Text to upper-case", required=True)],
        )
        async def shout(params: dict) -> ToolResult:
            return ToolResult.ok(params["text"].upper())

    Returns:
        Decorator producing a ToolDefinition

    Raises:
        TypeError: If the decorated object is not callable
    """

    def decorator(func: ToolCallable) -> ToolDefinition:
        if not callable(func):
            raise TypeError(f"Tool '{name or func!r}' must be callable")

        tool_name = name or func.__name__
        tool_description = description
        if not tool_description and func.__doc__:
            # Use first line of docstring
            tool_description = func.__doc__.strip().split("\n")[0]
        if not tool_description:
            tool_description = f"{tool_name} tool"

        definition = ToolDefinition(
            name=tool_name,
            description=tool_description,
            parameters=list(parameters),
            execute=func,
        )
        logger.debug(f"Declared tool '{tool_name}' with {len(definition.parameters)} parameters")
        return definition

    return decorator
