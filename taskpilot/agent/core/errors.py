"""
Agent error classes.

This module defines the error classes used throughout the orchestration
engine. All of them inherit from the core error system.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from taskpilot.core.errors.errors import BaseError
from taskpilot.core.errors.errors import ErrorContext as CoreErrorContext
from taskpilot.core.errors.models import ValidationErrorDetail


class AgentError(BaseError):
    """Base error class for agent errors.

    All errors raised by the orchestrator, planners, providers and the
    resilience layer inherit from this class.
    """

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        component: str = "agent",
        operation: str = "unknown",
        **context: Union[str, int, bool, None]
    ):
        """Initialize agent error.

        Args:
            message: Error message
            cause: Original exception that caused this error
            component: Agent component name
            operation: Operation being performed
            **context: Additional context information
        """
        error_context = CoreErrorContext.create(
            error_type=self.__class__.__name__,
            component=component,
            operation=operation,
        )
        super().__init__(message, error_context, cause)

        self.additional_context: Dict[str, Any] = {k: v for k, v in context.items() if v is not None}

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary.

        Returns:
            Dictionary representation of the error
        """
        result = super().to_dict()
        result["additional_context"] = self.additional_context
        if self.cause is not None:
            if isinstance(self.cause, BaseError):
                result["cause"] = self.cause.to_dict()
            else:
                result["cause"] = {
                    "error_type": self.cause.__class__.__name__,
                    "message": str(self.cause),
                }
        return result


class ComponentError(AgentError):
    """Error in component operation."""

    def __init__(
        self,
        message: str,
        component_name: str,
        operation: Optional[str] = None,
        cause: Optional[Exception] = None,
        **context: Union[str, int, bool, None]
    ):
        super().__init__(
            message,
            cause=cause,
            component=component_name,
            operation=operation or "unknown",
            component_name=component_name,
            **context
        )


class ConfigurationError(AgentError):
    """Error in configuration.

    Raised when there is an invalid configuration value or missing required config.
    """

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        cause: Optional[Exception] = None,
        **context: Union[str, int, bool, None]
    ):
        super().__init__(
            message,
            cause=cause,
            component="configuration",
            operation="load",
            config_key=config_key,
            **context
        )
        self.config_key = config_key


class PlanningError(AgentError):
    """Error raised when a planner cannot produce a usable plan."""

    def __init__(
        self,
        message: str,
        planner_name: str = "planner",
        cause: Optional[Exception] = None,
        **context: Union[str, int, bool, None]
    ):
        super().__init__(
            message,
            cause=cause,
            component=planner_name,
            operation="plan",
            **context
        )


class TaskValidationError(AgentError):
    """Error raised when task input is rejected before a task is created."""

    def __init__(
        self,
        message: str,
        details: Optional[List[ValidationErrorDetail]] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message, cause=cause, component="orchestrator", operation="validate_input")
        self.details = details or []

    @classmethod
    def from_pydantic(cls, error: PydanticValidationError) -> "TaskValidationError":
        """Build a task validation error from a pydantic validation error."""
        details = [
            ValidationErrorDetail(
                location=".".join(str(part) for part in item["loc"]) or "input",
                message=item["msg"],
                error_type=item["type"],
            )
            for item in error.errors()
        ]
        summary = "; ".join(f"{d.location}: {d.message}" for d in details)
        return cls(f"Invalid task input: {summary}", details=details, cause=error)

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        result["details"] = [d.model_dump() for d in self.details]
        return result


class CircuitOpenError(AgentError):
    """Raised when a circuit breaker rejects a call without attempting it."""

    def __init__(self, message: str = "Circuit breaker is open", **context: Union[str, int, bool, None]):
        super().__init__(message, component="circuit_breaker", operation="execute", **context)


class NonRetryableError(AgentError):
    """Marks a failure the caller knows must not be retried."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message, cause=cause, component="resilience", operation="retry")


class ProviderError(ComponentError):
    """Error raised by an external service provider (e.g. the LLM API)."""

    def __init__(
        self,
        message: str,
        provider_name: str,
        operation: Optional[str] = None,
        cause: Optional[Exception] = None,
        **context: Union[str, int, bool, None]
    ):
        super().__init__(message, component_name=provider_name, operation=operation, cause=cause, **context)
        self.provider_name = provider_name
