"""Tests for the tool registry."""

import logging

import pytest

from taskpilot.agent.components.task.execution.decorators import param, tool
from taskpilot.agent.components.task.execution.models import ToolDefinition, ToolResult
from taskpilot.agent.components.task.execution.registry import ToolRegistry


@tool(
    name="greet",
    parameters=[
        param("name", "string", "Who to greet", required=True),
        param("greeting", "string", "Greeting word", default="Hello"),
    ],
)
async def greet(params):
    """Greet someone."""
    return ToolResult.ok(f"{params['greeting']}, {params['name']}!")


@tool(name="sync_tool")
def sync_tool(params):
    """Synchronous tool."""
    return ToolResult.ok("sync")


@tool(name="raising_tool")
async def raising_tool(params):
    """Raises instead of returning a result."""
    raise RuntimeError("kaboom")


@tool(name="wrong_return")
async def wrong_return(params):
    """Returns a plain value."""
    return {"not": "a ToolResult"}


class TestRegistration:
    """Test registering and looking up tools."""

    def test_register_and_get(self):
        """Test basic registration."""
        registry = ToolRegistry()
        registry.register(greet)

        assert registry.get("greet") is greet
        assert registry.contains("greet")
        assert "greet" in registry
        assert len(registry) == 1

    def test_get_unknown(self):
        """Test missing lookups return None."""
        assert ToolRegistry().get("nope") is None

    def test_overwrite_logs_warning(self, caplog):
        """Test that re-registration replaces the tool with a warning."""
        registry = ToolRegistry([greet])
        replacement = ToolDefinition(
            name="greet",
            description="Replacement",
            execute=lambda params: ToolResult.ok("replaced"),
        )

        with caplog.at_level(logging.WARNING):
            registry.register(replacement)

        assert registry.get("greet") is replacement
        assert "Overwriting existing tool registration: greet" in caplog.text

    def test_register_rejects_non_definitions(self):
        """Test type checking on register."""
        with pytest.raises(TypeError):
            ToolRegistry().register(lambda params: None)

    def test_unregister(self):
        """Test unregister return values."""
        registry = ToolRegistry([greet])

        assert registry.unregister("greet") is True
        assert registry.unregister("greet") is False
        assert registry.remove("greet") is False

    def test_list_and_filter(self):
        """Test listing names in registration order."""
        registry = ToolRegistry([sync_tool, greet])

        assert registry.list() == ["sync_tool", "greet"]
        assert registry.list({"parameter": "name"}) == ["greet"]
        assert [d.name for d in registry.get_all()] == ["sync_tool", "greet"]

    def test_catalog_and_schemas(self):
        """Test planner catalog and function schemas."""
        registry = ToolRegistry([greet])

        entry = registry.catalog()[0]
        schema = registry.to_function_schemas()[0]

        assert entry.name == "greet"
        assert [p.name for p in entry.parameters] == ["name", "greeting"]
        assert schema["function"]["parameters"]["required"] == ["name"]
        assert schema["function"]["parameters"]["properties"]["greeting"]["type"] == "string"

    def test_clear(self):
        """Test clearing."""
        registry = ToolRegistry([greet, sync_tool])
        registry.clear()

        assert registry.list() == []


class TestExecute:
    """Test ToolRegistry.execute."""

    @pytest.mark.asyncio
    async def test_unknown_tool(self):
        """Test that unknown tools fail without invoking anything."""
        result = await ToolRegistry().execute("missing", {})

        assert result.success is False
        assert result.error == "Tool 'missing' not found"

    @pytest.mark.asyncio
    async def test_missing_required_parameters(self):
        """Test fail-fast on missing required parameters."""
        result = await ToolRegistry([greet]).execute("greet", {"greeting": "Hi"})

        assert result.success is False
        assert result.error == "Missing required parameters: name"
        assert "execution_time_ms" in result.metadata

    @pytest.mark.asyncio
    async def test_defaults_merged(self):
        """Test that declared defaults fill absent parameters."""
        result = await ToolRegistry([greet]).execute("greet", {"name": "Ada"})

        assert result.success is True
        assert result.data == "Hello, Ada!"

    @pytest.mark.asyncio
    async def test_explicit_values_win_over_defaults(self):
        """Test that supplied values are not replaced."""
        result = await ToolRegistry([greet]).execute("greet", {"name": "Ada", "greeting": "Hi"})

        assert result.data == "Hi, Ada!"

    @pytest.mark.asyncio
    async def test_execution_time_attached(self):
        """Test execution_time_ms metadata on success."""
        result = await ToolRegistry([greet]).execute("greet", {"name": "Ada"})

        assert isinstance(result.metadata["execution_time_ms"], float)
        assert result.metadata["execution_time_ms"] >= 0

    @pytest.mark.asyncio
    async def test_sync_tool(self):
        """Test tools returning a result directly."""
        result = await ToolRegistry([sync_tool]).execute("sync_tool", {})

        assert result.data == "sync"

    @pytest.mark.asyncio
    async def test_raising_tool(self):
        """Test that raised errors become failed results."""
        result = await ToolRegistry([raising_tool]).execute("raising_tool", {})

        assert result.success is False
        assert result.error == "kaboom"
        assert "execution_time_ms" in result.metadata

    @pytest.mark.asyncio
    async def test_wrong_return_type(self):
        """Test that tools must return a ToolResult."""
        result = await ToolRegistry([wrong_return]).execute("wrong_return", {})

        assert result.success is False
        assert "instead of ToolResult" in result.error

    @pytest.mark.asyncio
    async def test_input_not_mutated(self):
        """Test that the caller's parameter map is left alone."""
        params = {"name": "Ada"}

        await ToolRegistry([greet]).execute("greet", params)

        assert params == {"name": "Ada"}
