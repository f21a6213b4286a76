"""Tests for engine wiring."""

from unittest.mock import AsyncMock

import pytest

from taskpilot.agent.components.task.execution.registry import ToolRegistry
from taskpilot.agent.components.task.models import TaskStatus
from taskpilot.agent.components.task.planning.planner import LLMPlanner
from taskpilot.agent.core.factory import create_default_registry, create_llm_client, create_orchestrator
from taskpilot.core.settings.settings import LLMSettings, TaskPilotSettings
from taskpilot.providers.llm.openai_chat.provider import OpenAIProvider


class TestCreateDefaultRegistry:
    """Test the built-in registry."""

    def test_builtin_tools_registered(self):
        """Test that every built-in tool is present, in order."""
        registry = create_default_registry()

        assert registry.list() == [
            "analyze_text",
            "transform_json",
            "calculate_date",
            "http_request",
            "validate_data",
        ]

    def test_independent_instances(self):
        """Test that registries are not shared."""
        first = create_default_registry()
        second = create_default_registry()
        first.clear()

        assert len(second) == 5


class TestCreateOrchestrator:
    """Test create_orchestrator."""

    def test_without_api_key_uses_heuristics(self):
        """Test that no LLM planner is wired without credentials."""
        orchestrator = create_orchestrator(TaskPilotSettings())

        assert orchestrator.planner is None
        assert orchestrator.fallback_planner.fallback_tool == "analyze_text"

    def test_with_api_key(self):
        """Test that an API key wires the OpenAI-backed planner."""
        settings = TaskPilotSettings(llm=LLMSettings(api_key="sk-test"))

        orchestrator = create_orchestrator(settings)

        assert isinstance(orchestrator.planner, LLMPlanner)
        assert isinstance(orchestrator.planner.llm_client, OpenAIProvider)
        assert orchestrator.planner.retry is None

    def test_injected_client_gets_retries(self):
        """Test that a custom LLM client is retried by the planner."""
        client = AsyncMock()

        orchestrator = create_orchestrator(TaskPilotSettings(), llm_client=client)

        assert orchestrator.planner.llm_client is client
        assert orchestrator.planner.retry is not None

    def test_use_llm_false(self):
        """Test disabling the LLM planner."""
        orchestrator = create_orchestrator(TaskPilotSettings(), llm_client=AsyncMock(), use_llm=False)

        assert orchestrator.planner is None

    def test_custom_fallback(self):
        """Test fallback settings reach the heuristic planner."""
        settings = TaskPilotSettings(fallback_tool="validate_data", fallback_parameter="value")

        orchestrator = create_orchestrator(settings, registry=ToolRegistry())

        assert orchestrator.fallback_planner.fallback_tool == "validate_data"
        assert orchestrator.fallback_planner.fallback_parameter == "value"
        assert len(orchestrator.registry) == 0

    def test_create_llm_client(self):
        """Test client creation depends on the API key."""
        assert create_llm_client(TaskPilotSettings()) is None
        assert isinstance(create_llm_client(TaskPilotSettings(llm=LLMSettings(api_key="sk"))), OpenAIProvider)

    @pytest.mark.asyncio
    async def test_planned_task_end_to_end(self):
        """Test an LLM-planned task with a fake client."""
        client = AsyncMock()
        client.complete_json.return_value = {
            "reasoning": "date math",
            "steps": [
                {
                    "name": "Add days",
                    "description": "Add ten days",
                    "toolName": "calculate_date",
                    "parameters": {"operation": "add", "date": "2024-01-01T00:00:00Z", "amount": 10, "unit": "days"},
                },
                {
                    "name": "Inspect",
                    "tool_name": "transform_json",
                    "parameters": {"data": "$step.step_1.result", "operation": "extract", "path": "result"},
                },
            ],
        }
        orchestrator = create_orchestrator(TaskPilotSettings(), llm_client=client)

        task = await orchestrator.execute({"description": "what is ten days after new year 2024"})

        assert task.status == TaskStatus.COMPLETED
        assert task.metadata["planner"] == "primary"
        assert task.result["step_2"]["result"] == "2024-01-11T00:00:00Z"
