"""Core foundational models and utilities."""

from .models import (
    MutableStrictBaseModel,
    StrictBaseModel,
)

__all__ = [
    "StrictBaseModel",
    "MutableStrictBaseModel",
]
