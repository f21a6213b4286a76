"""Tests for the interactive tool-calling session."""

import json
from unittest.mock import AsyncMock

import pytest

from taskpilot.agent.core.interactive import NO_RESPONSE, InteractiveSession
from taskpilot.providers.llm.models import LLMResponse, ToolCall


def tool_call_response(*calls):
    return LLMResponse(tool_calls=list(calls))


@pytest.fixture
def llm_client():
    client = AsyncMock()
    client.model = "test-model"
    return client


class TestInteractiveSession:
    """Test InteractiveSession.run."""

    @pytest.mark.asyncio
    async def test_plain_answer(self, llm_client, registry):
        """Test a reply without tool calls."""
        llm_client.complete.return_value = LLMResponse(content="Hello!")
        session = InteractiveSession(llm_client, registry)

        reply = await session.run("Hi")

        assert reply == "Hello!"
        kwargs = llm_client.complete.await_args.kwargs
        assert kwargs["tool_choice"] == "auto"
        assert {t["function"]["name"] for t in kwargs["tools"]} == set(registry.list())

    @pytest.mark.asyncio
    async def test_tool_call_loop(self, llm_client, registry):
        """Test that tool calls are executed and their results sent back."""
        call = ToolCall(id="call_1", name="analyze_text", arguments=json.dumps({"text": "one two three"}))
        llm_client.complete.side_effect = [
            tool_call_response(call),
            LLMResponse(content="The text has 3 words."),
        ]
        session = InteractiveSession(llm_client, registry)

        reply = await session.run("How many words in 'one two three'?")

        assert reply == "The text has 3 words."
        assert llm_client.complete.await_count == 2
        messages = llm_client.complete.await_args_list[1].args[0]
        assert [m.role for m in messages] == ["system", "user", "assistant", "tool"]
        assert messages[2].tool_calls == [call]
        tool_payload = json.loads(messages[3].content)
        assert messages[3].tool_call_id == "call_1"
        assert tool_payload["success"] is True
        assert tool_payload["data"]["word_count"] == 3

    @pytest.mark.asyncio
    async def test_invalid_arguments_reported_to_model(self, llm_client, registry):
        """Test that malformed arguments become a failed tool result."""
        llm_client.complete.side_effect = [
            tool_call_response(ToolCall(id="c", name="analyze_text", arguments="{not json")),
            LLMResponse(content="Sorry"),
        ]
        session = InteractiveSession(llm_client, registry)

        await session.run("go")

        tool_message = session.transcript[-1]
        payload = json.loads(tool_message.content)
        assert payload["success"] is False
        assert "Invalid tool arguments" in payload["error"]

    @pytest.mark.asyncio
    async def test_unknown_tool(self, llm_client, registry):
        """Test that an unknown tool is reported, not raised."""
        llm_client.complete.side_effect = [
            tool_call_response(ToolCall(id="c", name="teleport", arguments="{}")),
            LLMResponse(content="Cannot do that"),
        ]
        session = InteractiveSession(llm_client, registry)

        reply = await session.run("teleport me")

        assert reply == "Cannot do that"
        assert "not found" in json.loads(session.transcript[-1].content)["error"]

    @pytest.mark.asyncio
    async def test_iteration_limit(self, llm_client, registry):
        """Test that an endless tool-calling model is cut off."""
        call = ToolCall(id="c", name="calculate_date", arguments=json.dumps({"operation": "now"}))
        llm_client.complete.return_value = tool_call_response(call)
        session = InteractiveSession(llm_client, registry, max_iterations=2)

        reply = await session.run("loop forever")

        assert reply == NO_RESPONSE
        assert llm_client.complete.await_count == 3

    @pytest.mark.asyncio
    async def test_empty_content(self, llm_client, registry):
        """Test the default reply when the model returns nothing."""
        llm_client.complete.return_value = LLMResponse(content=None)

        assert await InteractiveSession(llm_client, registry).run("?") == NO_RESPONSE

    def test_invalid_max_iterations(self, llm_client, registry):
        """Test argument validation."""
        with pytest.raises(ValueError):
            InteractiveSession(llm_client, registry, max_iterations=0)
