"""Message and response models shared by LLM clients."""

import json
from typing import Any, Dict, List, Literal, Optional

from pydantic import Field

from taskpilot.core.models import StrictBaseModel

MessageRole = Literal["system", "user", "assistant", "tool"]


class ToolCall(StrictBaseModel):
    """A function call requested by the model."""

    id: str = Field(..., description="Call id echoed back in the tool message")
    name: str = Field(..., description="Requested tool name")
    arguments: str = Field(default="{}", description="JSON-encoded arguments as returned by the API")

    def parsed_arguments(self) -> Dict[str, Any]:
        """Decode the arguments; malformed or non-object JSON raises ValueError."""
        decoded = json.loads(self.arguments or "{}")
        if not isinstance(decoded, dict):
            raise ValueError(f"Tool call arguments for '{self.name}' must be a JSON object")
        return decoded


class ChatMessage(StrictBaseModel):
    """One chat message."""

    role: MessageRole
    content: str = ""
    name: Optional[str] = None
    tool_call_id: Optional[str] = None
    tool_calls: List[ToolCall] = Field(default_factory=list)

    @classmethod
    def system(cls, content: str) -> "ChatMessage":
        return cls(role="system", content=content)

    @classmethod
    def user(cls, content: str) -> "ChatMessage":
        return cls(role="user", content=content)

    def to_openai(self) -> Dict[str, Any]:
        """Convert to the chat completions message format."""
        if self.role == "tool":
            return {"role": "tool", "content": self.content, "tool_call_id": self.tool_call_id or ""}

        message: Dict[str, Any] = {"role": self.role, "content": self.content}
        if self.name:
            message["name"] = self.name
        if self.tool_calls:
            message["tool_calls"] = [
                {
                    "id": call.id,
                    "type": "function",
                    "function": {"name": call.name, "arguments": call.arguments},
                }
                for call in self.tool_calls
            ]
        return message


class LLMResponse(StrictBaseModel):
    """Normalized completion result."""

    content: Optional[str] = None
    tool_calls: List[ToolCall] = Field(default_factory=list)
    finish_reason: Optional[str] = None
    model: str = ""
    prompt_tokens: int = 0
    completion_tokens: int = 0

    @property
    def has_tool_calls(self) -> bool:
        return bool(self.tool_calls)
