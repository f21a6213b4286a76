"""Tool registry.

Maps tool names to ToolDefinitions and executes tool calls: unknown tools and
missing required parameters fail fast, declared defaults are merged in, and
any error raised by the tool is turned into a failed ToolResult. Every result
leaves the registry with ``execution_time_ms`` in its metadata.

Registration is expected to happen once at startup; after that the registry
is only read, so concurrent task executions may share one instance.
"""

import inspect
import logging
import time
from typing import Any, Dict, Iterable, List, Optional

from taskpilot.core.registry.registry import BaseRegistry
from taskpilot.utils.logging_config import log_tool_execution

from .models import ToolCatalogEntry, ToolDefinition, ToolResult

logger = logging.getLogger(__name__)


class ToolRegistry(BaseRegistry[ToolDefinition]):
    """Registry of tool definitions keyed by name.

    Re-registering an existing name overwrites it (last registration wins)
    and logs a warning.
    """

    def __init__(self, tools: Optional[Iterable[ToolDefinition]] = None) -> None:
        self._tools: Dict[str, ToolDefinition] = {}
        if tools:
            self.register_many(tools)

    def register(self, obj: ToolDefinition) -> None:
        """Register a tool definition.

        Args:
            obj: Tool definition; its name is the registry key
        """
        if not isinstance(obj, ToolDefinition):
            raise TypeError(f"Expected ToolDefinition, got {type(obj).__name__}")

        if obj.name in self._tools:
            logger.warning(f"Overwriting existing tool registration: {obj.name}")
        self._tools[obj.name] = obj
        logger.info(f"Registered tool: {obj.name}")

    def register_many(self, tools: Iterable[ToolDefinition]) -> None:
        for definition in tools:
            self.register(definition)

    def unregister(self, name: str) -> bool:
        """Remove a tool.

        Returns:
            True if removed, False if not found
        """
        if name in self._tools:
            del self._tools[name]
            logger.info(f"Unregistered tool: {name}")
            return True
        return False

    def remove(self, name: str) -> bool:
        return self.unregister(name)

    def get(self, name: str) -> Optional[ToolDefinition]:
        return self._tools.get(name)

    def contains(self, name: str) -> bool:
        return name in self._tools

    def list(self, filter_criteria: Optional[Dict[str, Any]] = None) -> List[str]:
        """List registered tool names in registration order.

        Args:
            filter_criteria: Optional filtering, e.g. {"parameter": "text"}
                keeps tools declaring a parameter with that name

        Returns:
            List of tool names
        """
        if not filter_criteria:
            return [name for name in self._tools]

        results = []
        for name, definition in self._tools.items():
            if "parameter" in filter_criteria:
                if filter_criteria["parameter"] not in {p.name for p in definition.parameters}:
                    continue
            results.append(name)
        return results

    def get_all(self) -> List[ToolDefinition]:
        return [definition for definition in self._tools.values()]

    def catalog(self) -> List[ToolCatalogEntry]:
        """Describe every registered tool for planners."""
        return [definition.to_catalog_entry() for definition in self._tools.values()]

    def to_function_schemas(self) -> List[Dict[str, Any]]:
        """Function-calling schemas for every registered tool."""
        return [definition.to_function_schema() for definition in self._tools.values()]

    def clear(self) -> None:
        """Clear all tool registrations."""
        self._tools.clear()
        logger.info("Cleared all tool registrations")

    async def execute(self, name: str, params: Dict[str, Any]) -> ToolResult:
        """Validate parameters and run a tool.

        Args:
            name: Registered tool name
            params: Parameter map (already resolved)

        Returns:
            ToolResult; never raises for tool-side failures
        """
        definition = self._tools.get(name)
        if definition is None:
            return ToolResult(success=False, error=f"Tool '{name}' not found")

        start_time = time.perf_counter()

        missing = [p.name for p in definition.parameters if p.required and p.name not in params]
        if missing:
            duration = _elapsed_ms(start_time)
            log_tool_execution(name, params, success=False, duration_ms=duration)
            return ToolResult(
                success=False,
                error=f"Missing required parameters: {', '.join(missing)}",
                metadata={"execution_time_ms": duration},
            )

        resolved = dict(params)
        for parameter in definition.parameters:
            if parameter.name not in resolved and parameter.has_default:
                resolved[parameter.name] = parameter.default

        try:
            outcome = definition.execute(resolved)
            if inspect.isawaitable(outcome):
                outcome = await outcome
            if not isinstance(outcome, ToolResult):
                raise TypeError(
                    f"Tool '{name}' returned {type(outcome).__name__} instead of ToolResult"
                )
        except Exception as e:
            duration = _elapsed_ms(start_time)
            logger.error(f"Tool execution failed: {name} - {e}", exc_info=True)
            log_tool_execution(name, params, success=False, duration_ms=duration)
            return ToolResult(
                success=False,
                error=str(e) or e.__class__.__name__,
                metadata={"execution_time_ms": duration},
            )

        duration = _elapsed_ms(start_time)
        log_tool_execution(name, params, success=outcome.success, duration_ms=duration)
        return outcome.with_metadata(execution_time_ms=duration)


def _elapsed_ms(start_time: float) -> float:
    return (time.perf_counter() - start_time) * 1000
