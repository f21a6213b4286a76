"""Providers for external services.

- LLM providers (llm): chat completion clients used for planning and
  interactive tool calling
"""
