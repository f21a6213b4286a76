"""Base error classes with structured error context.

This module provides the foundation for the error handling system:
a context object describing where an error happened and a base exception
that carries it together with the underlying cause.
"""

from datetime import datetime
from typing import Any

from .models import ErrorContextData


class ErrorContext:
    """Where an error happened: error type, component and operation."""

    def __init__(self, context_data: ErrorContextData):
        self._data = context_data

    @classmethod
    def create(cls, error_type: str, component: str, operation: str) -> "ErrorContext":
        """Build a context whose location is ``<component>.<operation>``."""
        return cls(ErrorContextData(
            error_type=error_type,
            error_location=f"{component}.{operation}",
            component=component,
            operation=operation,
        ))

    @property
    def data(self) -> ErrorContextData:
        return self._data

    @property
    def timestamp(self) -> datetime:
        return self._data.timestamp

    def __str__(self) -> str:
        return f"ErrorContext({self._data.model_dump()})"


class BaseError(Exception):
    """Base class for all taskpilot errors.

    Carries a message, a structured context and an optional cause so that
    failures can be logged and reported uniformly.
    """

    def __init__(self, message: str, context: ErrorContext, cause: Exception | None = None):
        self.message = message
        self.context = context
        self.cause = cause
        self.timestamp = datetime.now()

        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Serializable form for structured logs and API responses."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "timestamp": self.timestamp.isoformat(),
            "context": self.context.data.model_dump(mode="json"),
            "cause": str(self.cause) if self.cause else None,
        }

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message} (caused by: {self.cause})"
        return self.message
