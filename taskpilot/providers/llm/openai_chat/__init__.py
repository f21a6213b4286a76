"""OpenAI chat completions provider."""

from .provider import OpenAIProvider

__all__ = ["OpenAIProvider"]
