"""Pydantic base models for every taskpilot model.

Values crossing a boundary (task input, tool results, events) are frozen
and validated strictly. Task state that the orchestrator updates while a
task runs uses the mutable variant, which still validates each assignment.
"""

from pydantic import BaseModel, ConfigDict


class StrictBaseModel(BaseModel):
    """Frozen model: no coercion, no unknown fields, defaults validated too."""

    model_config = ConfigDict(
        strict=True,
        extra="forbid",
        validate_assignment=True,
        frozen=True,
        validate_default=True,
        use_enum_values=False,    # keep enum members, e.g. TaskStatus.is_terminal
        arbitrary_types_allowed=False,
    )


class MutableStrictBaseModel(BaseModel):
    """Strict model whose fields may be reassigned (tasks, steps, execution contexts)."""

    model_config = ConfigDict(
        strict=True,
        extra="forbid",
        validate_assignment=True,
        frozen=False,
        validate_default=True,
        use_enum_values=False,
        arbitrary_types_allowed=False,
    )


__all__ = [
    "StrictBaseModel",
    "MutableStrictBaseModel",
]
