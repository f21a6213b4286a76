"""LLM client interface and providers."""

from .base import LLMClientInterface, ToolChoice
from .models import ChatMessage, LLMResponse, ToolCall
from .openai_chat.provider import OpenAIProvider

__all__ = [
    "LLMClientInterface",
    "ToolChoice",
    "ChatMessage",
    "LLMResponse",
    "ToolCall",
    "OpenAIProvider",
]
