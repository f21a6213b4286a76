"""LLM client interface.

Planners and the interactive session depend on this protocol only, so any
client (the OpenAI provider, a test double) can be injected.
"""

from typing import Any, AsyncIterator, Dict, List, Optional, Protocol, Union, runtime_checkable

from .models import ChatMessage, LLMResponse

ToolChoice = Union[str, Dict[str, Any]]


@runtime_checkable
class LLMClientInterface(Protocol):
    """Chat-completion capable client."""

    model: str

    async def complete(
        self,
        messages: List[ChatMessage],
        tools: Optional[List[Dict[str, Any]]] = None,
        tool_choice: Optional[ToolChoice] = None,
    ) -> LLMResponse:
        """Run a chat completion, optionally offering function tools."""
        ...

    async def complete_json(
        self,
        messages: List[ChatMessage],
        schema: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Run a completion constrained to a JSON object and return it decoded."""
        ...

    def stream(self, messages: List[ChatMessage]) -> AsyncIterator[str]:
        """Yield text deltas of a streamed completion."""
        ...
