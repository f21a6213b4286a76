"""Agent core: errors, resilience and orchestration.

The orchestrator, interactive session and factory are not re-exported here
to keep this package importable from the lower layers.
Import directly: from taskpilot.agent.core.orchestrator import TaskOrchestrator
"""

from taskpilot.agent.core.errors import (
    AgentError,
    CircuitOpenError,
    ComponentError,
    ConfigurationError,
    NonRetryableError,
    PlanningError,
    ProviderError,
    TaskValidationError,
)
from taskpilot.agent.core.resilience import CircuitBreaker, CircuitState, is_retryable_error, with_retry

__all__ = [
    "AgentError",
    "CircuitOpenError",
    "ComponentError",
    "ConfigurationError",
    "NonRetryableError",
    "PlanningError",
    "ProviderError",
    "TaskValidationError",
    "CircuitBreaker",
    "CircuitState",
    "is_retryable_error",
    "with_retry",
]
