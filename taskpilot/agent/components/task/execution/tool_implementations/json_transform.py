"""JSON transformation tool: extract, filter and flatten."""

from typing import Any, Dict, List

from ..decorators import param, tool
from ..models import ToolResult


def get_nested_value(data: Any, path: str) -> Any:
    """Follow a dot-separated path through nested mappings.

    Returns None as soon as a segment cannot be followed.
    """
    current = data
    for part in path.split("."):
        if isinstance(current, dict):
            current = current.get(part)
        else:
            return None
    return current


def flatten_object(data: Dict[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Flatten nested mappings into dot-separated keys. Lists are kept as values."""
    flat: Dict[str, Any] = {}
    for key, value in data.items():
        new_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            flat.update(flatten_object(value, new_key))
        else:
            flat[new_key] = value
    return flat


def _filter_fields(items: List[Any], fields: List[str]) -> List[Any]:
    filtered = []
    for item in items:
        if isinstance(item, dict):
            filtered.append({f: item[f] for f in fields if f in item})
        else:
            filtered.append(item)
    return filtered


@tool(
    name="transform_json",
    description="Transforms JSON data by extracting, filtering, or flattening fields",
    parameters=[
        param("data", "object", "The JSON data to transform", required=True),
        param("operation", "string", "Operation type: extract, filter, flatten", required=True),
        param("path", "string", "JSON path for extraction (dot notation)"),
        param("fields", "array", "Fields to include in the result"),
    ],
)
async def transform_json(params: dict) -> ToolResult:
    data = params["data"]
    operation = params["operation"]

    if operation == "extract":
        path = params.get("path")
        if not path:
            return ToolResult.fail("Path is required for extract operation")
        return ToolResult.ok(get_nested_value(data, path))

    if operation == "filter":
        if not isinstance(data, list):
            return ToolResult.fail("Data must be an array for filter operation")
        fields = params.get("fields")
        if not fields:
            return ToolResult.fail("Fields are required for filter operation")
        return ToolResult.ok(_filter_fields(data, list(fields)))

    if operation == "flatten":
        if not isinstance(data, dict):
            return ToolResult.fail("Data must be an object for flatten operation")
        return ToolResult.ok(flatten_object(data))

    return ToolResult.fail(f"Unknown operation: {operation}")
