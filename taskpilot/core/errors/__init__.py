"""Core error types."""

from .errors import BaseError, ErrorContext
from .models import ErrorContextData, ValidationErrorDetail

__all__ = [
    "BaseError",
    "ErrorContext",
    "ErrorContextData",
    "ValidationErrorDetail",
]
