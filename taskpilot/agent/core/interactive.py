"""Interactive tool-calling session.

The LLM is offered every registered tool as a function. Whenever it answers
with tool calls, each call is executed through the ToolRegistry and the
JSON-encoded ToolResult is sent back as a ``tool`` message, until the model
replies with plain text or the iteration limit is reached.
"""

import json
import logging
from typing import List, Optional

from taskpilot.agent.components.task.execution.models import ToolResult
from taskpilot.agent.components.task.execution.registry import ToolRegistry
from taskpilot.providers.llm.base import LLMClientInterface
from taskpilot.providers.llm.models import ChatMessage, ToolCall

logger = logging.getLogger(__name__)

DEFAULT_SYSTEM_PROMPT = """You are an AI assistant that can use tools to help users.
When you need to perform an action, use the appropriate tool.
Always explain what you're doing and provide helpful responses."""

NO_RESPONSE = "No response generated"


class InteractiveSession:
    """Single-turn chat with tool calling."""

    def __init__(
        self,
        llm_client: LLMClientInterface,
        registry: ToolRegistry,
        system_prompt: str = DEFAULT_SYSTEM_PROMPT,
        max_iterations: int = 10,
    ):
        if max_iterations <= 0:
            raise ValueError("max_iterations must be greater than 0")
        self.llm_client = llm_client
        self.registry = registry
        self.system_prompt = system_prompt
        self.max_iterations = max_iterations
        self.messages: List[ChatMessage] = []

    async def run(self, message: str) -> str:
        """Answer ``message``, executing any tools the model asks for.

        Returns:
            The model's final text, or "No response generated"
        """
        tools = self.registry.to_function_schemas() or None
        self.messages = [ChatMessage.system(self.system_prompt), ChatMessage.user(message)]

        response = await self.llm_client.complete(self.messages, tools=tools, tool_choice="auto" if tools else None)

        iterations = 0
        while response.has_tool_calls:
            iterations += 1
            if iterations > self.max_iterations:
                logger.warning(f"Tool calling stopped after {self.max_iterations} iterations")
                break

            self.messages.append(
                ChatMessage(role="assistant", content=response.content or "", tool_calls=response.tool_calls)
            )
            for call in response.tool_calls:
                result = await self._execute_call(call)
                self.messages.append(
                    ChatMessage(
                        role="tool",
                        content=json.dumps(result.model_dump(mode="json"), default=str),
                        tool_call_id=call.id,
                    )
                )

            response = await self.llm_client.complete(self.messages, tools=tools, tool_choice="auto")

        return response.content or NO_RESPONSE

    async def _execute_call(self, call: ToolCall) -> ToolResult:
        try:
            params = call.parsed_arguments()
        except ValueError as e:
            logger.warning(f"Invalid arguments for tool call {call.name}: {e}")
            return ToolResult.fail(f"Invalid tool arguments: {e}")

        logger.info(f"Executing tool call: {call.name} ({', '.join(params)})")
        return await self.registry.execute(call.name, params)

    @property
    def transcript(self) -> Optional[List[ChatMessage]]:
        return list(self.messages) if self.messages else None
