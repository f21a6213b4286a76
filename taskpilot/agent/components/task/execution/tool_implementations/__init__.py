"""Built-in tool implementations.

Each module declares one tool with the @tool decorator. ``builtin_tools``
lists them in registration order; nothing is registered on import.
"""

from .dates import calculate_date
from .http import http_request
from .json_transform import transform_json
from .text import analyze_text
from .validation import validate_data

builtin_tools = [
    analyze_text,
    transform_json,
    calculate_date,
    http_request,
    validate_data,
]

__all__ = [
    "analyze_text",
    "transform_json",
    "calculate_date",
    "http_request",
    "validate_data",
    "builtin_tools",
]
