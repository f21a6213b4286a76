"""Strict Pydantic models for error handling."""

from datetime import datetime

from pydantic import Field

from taskpilot.core.models import StrictBaseModel


class ErrorContextData(StrictBaseModel):
    """Strict error context data model."""

    error_type: str = Field(..., description="Type of error")
    error_location: str = Field(..., description="Location in code where error occurred")
    timestamp: datetime = Field(default_factory=datetime.now, description="When error occurred")

    component: str = Field(..., description="Component that raised the error")
    operation: str = Field(..., description="Operation being performed")


class ValidationErrorDetail(StrictBaseModel):
    """Strict validation error detail."""

    location: str = Field(..., description="Field or location of validation error")
    message: str = Field(..., description="Validation error message")
    error_type: str = Field(..., description="Type of validation error")
