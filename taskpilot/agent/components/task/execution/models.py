"""Core models for the tool system.

Tools declare their parameters with ToolParameter, are registered as
ToolDefinition objects and always answer with a ToolResult.
"""

from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from pydantic import Field, field_validator

from taskpilot.core.models import MutableStrictBaseModel, StrictBaseModel

# Dynamic parameter values: JSON-shaped data
ParamValue = Union[str, int, float, bool, None, Dict[str, "ParamValue"], List["ParamValue"]]
ParamMap = Dict[str, ParamValue]


class ParameterType(str, Enum):
    """Semantic type tag of a declared tool parameter."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"


class ToolParameter(StrictBaseModel):
    """A declared tool parameter."""

    name: str = Field(..., description="Parameter name")
    type: ParameterType = Field(..., description="Semantic type tag")
    description: str = Field(default="", description="What the parameter means")
    required: bool = Field(default=False, description="Whether callers must supply it")
    default: Any = Field(default=None, description="Value used when the parameter is absent")

    @property
    def has_default(self) -> bool:
        return self.default is not None


class ToolResult(StrictBaseModel):
    """Outcome of a tool invocation."""

    success: bool = Field(..., description="Whether the tool succeeded")
    data: Any = Field(default=None, description="Result payload")
    error: Optional[str] = Field(default=None, description="Failure message")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Execution metadata")

    @classmethod
    def ok(cls, data: Any = None, **metadata: Any) -> "ToolResult":
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def fail(cls, error: str, **metadata: Any) -> "ToolResult":
        return cls(success=False, error=error, metadata=metadata)

    def with_metadata(self, **metadata: Any) -> "ToolResult":
        """Return a copy with extra metadata merged in."""
        return self.model_copy(update={"metadata": {**self.metadata, **metadata}})


ToolCallable = Callable[[Dict[str, Any]], Union[ToolResult, Awaitable[ToolResult]]]


class ToolCatalogEntry(StrictBaseModel):
    """Tool description handed to planners (no executable)."""

    name: str
    description: str
    parameters: List[ToolParameter] = Field(default_factory=list)


class ToolDefinition(StrictBaseModel):
    """A registered tool: name, parameter schema and executable capability."""

    name: str = Field(..., description="Unique registry key")
    description: str = Field(..., description="What the tool does")
    parameters: List[ToolParameter] = Field(default_factory=list, description="Declared parameters, in order")
    execute: ToolCallable = Field(..., description="Callable receiving the validated parameter map")

    @field_validator('name')
    @classmethod
    def validate_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Tool name must not be empty")
        return v

    @field_validator('parameters')
    @classmethod
    def validate_unique_parameters(cls, v: List[ToolParameter]) -> List[ToolParameter]:
        names = [p.name for p in v]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate parameter names: {', '.join(duplicates)}")
        return v

    @property
    def required_parameters(self) -> List[str]:
        return [p.name for p in self.parameters if p.required]

    def to_catalog_entry(self) -> ToolCatalogEntry:
        return ToolCatalogEntry(name=self.name, description=self.description, parameters=list(self.parameters))

    def to_function_schema(self) -> Dict[str, Any]:
        """Describe the tool in the function-calling schema used by chat LLM APIs."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": {
                        p.name: {"type": p.type.value, "description": p.description}
                        for p in self.parameters
                    },
                    "required": self.required_parameters,
                },
            },
        }


class ExecutionContext(MutableStrictBaseModel):
    """Per-task scratch space threaded through step execution.

    ``variables`` is append-only: once a key is recorded it is never
    overwritten during the same task execution.
    """

    task_id: str = Field(..., description="Owning task")
    step_results: Dict[str, ToolResult] = Field(default_factory=dict, description="Step id -> tool result")
    variables: Dict[str, Any] = Field(default_factory=dict, description="Variable path -> value")

    def record_step_result(self, step_id: str, result: ToolResult) -> None:
        """Store a step's result; successful data is exposed as ``step.<id>.result``."""
        if step_id in self.step_results:
            raise ValueError(f"Result for step '{step_id}' is already recorded")
        self.step_results[step_id] = result
        if result.success and result.data is not None:
            self.set_variable(step_result_key(step_id), result.data)

    def set_variable(self, path: str, value: Any) -> None:
        if path in self.variables:
            raise ValueError(f"Variable '{path}' is already set")
        self.variables[path] = value

    def get_variable(self, path: str, default: Any = None) -> Any:
        return self.variables.get(path, default)


def step_result_key(step_id: str) -> str:
    """Variable path under which a step's result data is stored."""
    return f"step.{step_id}.result"
