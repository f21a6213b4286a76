"""Pattern-based data validation tool.

Patterns are matched against the whole value, so trailing newlines are rejected.
"""

import re

from ..decorators import param, tool
from ..models import ToolResult

VALIDATION_PATTERNS = {
    "email": re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+"),
    "url": re.compile(r"https?://[^\s/$.?#].[^\s]*"),
    "phone": re.compile(r"\+?[\d\s\-()]{10,}"),
    "uuid": re.compile(r"[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}", re.IGNORECASE),
    "date": re.compile(r"\d{4}-\d{2}-\d{2}"),
    "number": re.compile(r"-?\d+(\.\d+)?"),
}


@tool(
    name="validate_data",
    description="Validates data against common patterns (email, URL, phone, etc.)",
    parameters=[
        param("value", "string", "The value to validate", required=True),
        param("type", "string", "Validation type: email, url, phone, uuid, date, number", required=True),
    ],
)
async def validate_data(params: dict) -> ToolResult:
    value = str(params["value"])
    kind = params["type"]

    pattern = VALIDATION_PATTERNS.get(kind)
    if pattern is None:
        return ToolResult.fail(
            f"Unknown validation type: {kind}. Available: {', '.join(VALIDATION_PATTERNS)}"
        )

    return ToolResult.ok({
        "value": value,
        "type": kind,
        "is_valid": bool(pattern.fullmatch(value)),
        "pattern": pattern.pattern,
    })
