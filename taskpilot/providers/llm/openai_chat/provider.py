"""OpenAI provider implementation.

Wraps the ``openai`` AsyncOpenAI client behind LLMClientInterface. Every
request goes through the provider's circuit breaker, and inside it through
``with_retry`` with the configured backoff, so a string of transient API
failures is retried and a persistently failing API is short-circuited.
"""

import json
import logging
import time
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional, TypeVar

import openai
from openai import AsyncOpenAI

from taskpilot.agent.core.errors import ConfigurationError, ProviderError
from taskpilot.agent.core.resilience import CircuitBreaker, is_retryable_error, with_retry
from taskpilot.core.settings.settings import LLMSettings, ResilienceSettings
from taskpilot.utils.formatting.json import extract_json
from taskpilot.utils.logging_config import log_llm_call

from ..base import ToolChoice
from ..models import ChatMessage, LLMResponse, ToolCall

logger = logging.getLogger(__name__)

T = TypeVar('T')

PROVIDER_NAME = "openai"


def is_retryable_openai_error(error: BaseException) -> bool:
    """Transient-failure classifier aware of the openai exception types."""
    if isinstance(error, (openai.APIConnectionError, openai.RateLimitError, openai.InternalServerError)):
        return True
    if isinstance(error, (openai.AuthenticationError, openai.BadRequestError, openai.NotFoundError)):
        return False
    return is_retryable_error(error)


class OpenAIProvider:
    """Chat completion client for the OpenAI API.

    Args:
        settings: Model, credentials and generation parameters
        resilience: Retry and circuit breaker settings
        client: Pre-built AsyncOpenAI client (mainly for tests)
        breaker: Circuit breaker to use instead of a private one

    Raises:
        ConfigurationError: If no API key is configured and no client is given
    """

    def __init__(
        self,
        settings: LLMSettings,
        resilience: Optional[ResilienceSettings] = None,
        client: Optional[AsyncOpenAI] = None,
        breaker: Optional[CircuitBreaker] = None,
    ):
        if client is None and not settings.configured:
            raise ConfigurationError(
                "OPENAI_API_KEY is required for AI features. "
                "Set it in your environment or .env file, or run without the LLM planner.",
                config_key="OPENAI_API_KEY",
            )

        self.settings = settings
        self.resilience = resilience or ResilienceSettings()
        self.model = settings.model
        self._client = client or AsyncOpenAI(
            api_key=settings.api_key,
            base_url=settings.base_url,
            timeout=60.0,
        )
        self.breaker = breaker or CircuitBreaker(
            failure_threshold=self.resilience.breaker_failure_threshold,
            reset_timeout=self.resilience.reset_timeout,
            name=PROVIDER_NAME,
        )
        logger.info(f"OpenAIProvider initialized (model={self.model})")

    async def _guarded(self, operation: Callable[[], Awaitable[T]]) -> T:
        async def retried() -> T:
            return await with_retry(
                operation,
                retries=self.resilience.max_retries,
                min_delay=self.resilience.min_delay,
                max_delay=self.resilience.max_delay,
                factor=self.resilience.backoff_factor,
                is_retryable=is_retryable_openai_error,
            )

        return await self.breaker.execute(retried)

    async def complete(
        self,
        messages: List[ChatMessage],
        tools: Optional[List[Dict[str, Any]]] = None,
        tool_choice: Optional[ToolChoice] = None,
    ) -> LLMResponse:
        """Run a chat completion.

        Args:
            messages: Conversation so far
            tools: Function schemas the model may call
            tool_choice: "auto", "none" or a specific function selector

        Returns:
            Normalized LLMResponse
        """
        request: Dict[str, Any] = {
            "model": self.model,
            "messages": [m.to_openai() for m in messages],
            "max_tokens": self.settings.max_tokens,
            "temperature": self.settings.temperature,
        }
        if tools:
            request["tools"] = tools
            request["tool_choice"] = tool_choice or "auto"

        start_time = time.perf_counter()
        completion = await self._guarded(lambda: self._client.chat.completions.create(**request))
        response = self._to_response(completion)
        log_llm_call(
            self.model,
            response.prompt_tokens,
            response.completion_tokens,
            (time.perf_counter() - start_time) * 1000,
        )
        return response

    async def complete_json(
        self,
        messages: List[ChatMessage],
        schema: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Run a completion in JSON mode and decode the reply.

        Raises:
            ProviderError: If the reply is empty or not a JSON object
        """
        instruction = (
            f"You must respond with valid JSON that matches this schema: {json.dumps(schema)}"
            if schema
            else "You must respond with valid JSON only."
        )
        request: Dict[str, Any] = {
            "model": self.model,
            "messages": [m.to_openai() for m in [ChatMessage.system(instruction), *messages]],
            "max_tokens": self.settings.max_tokens,
            "temperature": self.settings.temperature,
            "response_format": {"type": "json_object"},
        }

        start_time = time.perf_counter()
        completion = await self._guarded(lambda: self._client.chat.completions.create(**request))
        response = self._to_response(completion)
        log_llm_call(
            self.model,
            response.prompt_tokens,
            response.completion_tokens,
            (time.perf_counter() - start_time) * 1000,
        )

        if not response.content:
            raise ProviderError("No content in completion response", provider_name=PROVIDER_NAME, operation="complete_json")

        parsed = extract_json(response.content)
        if not isinstance(parsed, dict):
            raise ProviderError(
                f"Failed to parse JSON response: {response.content[:200]}",
                provider_name=PROVIDER_NAME,
                operation="complete_json",
            )
        return parsed

    async def stream(self, messages: List[ChatMessage]) -> AsyncIterator[str]:
        """Yield text deltas; opening the stream is retried, consuming it is not."""
        request: Dict[str, Any] = {
            "model": self.model,
            "messages": [m.to_openai() for m in messages],
            "max_tokens": self.settings.max_tokens,
            "temperature": self.settings.temperature,
            "stream": True,
        }
        chunks = await self._guarded(lambda: self._client.chat.completions.create(**request))
        async for chunk in chunks:
            if not chunk.choices:
                continue
            delta = chunk.choices[0].delta.content
            if delta:
                yield delta

    def _to_response(self, completion: Any) -> LLMResponse:
        if not completion.choices:
            raise ProviderError("Completion returned no choices", provider_name=PROVIDER_NAME, operation="complete")

        choice = completion.choices[0]
        message = choice.message
        tool_calls = [
            ToolCall(id=call.id, name=call.function.name, arguments=call.function.arguments or "{}")
            for call in (message.tool_calls or [])
        ]
        usage = completion.usage
        return LLMResponse(
            content=message.content,
            tool_calls=tool_calls,
            finish_reason=choice.finish_reason,
            model=completion.model or self.model,
            prompt_tokens=usage.prompt_tokens if usage else 0,
            completion_tokens=usage.completion_tokens if usage else 0,
        )

    def get_state(self) -> Dict[str, Any]:
        """Provider status for monitoring."""
        return {"model": self.model, "breaker": self.breaker.get_state()}
