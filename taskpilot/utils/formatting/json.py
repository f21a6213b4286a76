"""JSON formatting utilities.

Helpers for pulling JSON out of LLM responses and for rendering tool
results and task payloads as readable JSON.
"""

import json
import re
from typing import Any

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)
_JSON_PATTERN = re.compile(r"(\{[\s\S]*\}|\[[\s\S]*\])")


def _loads_container(text: str) -> dict[str, Any] | list[Any] | None:
    try:
        result = json.loads(text)
    except json.JSONDecodeError:
        return None
    # Only dict or list, other JSON types are not useful here
    if isinstance(result, (dict, list)):
        return result
    return None


def extract_json(text: str) -> dict[str, Any] | list[Any] | None:
    """Extract JSON data from text.

    Handles bare JSON, JSON wrapped in markdown code fences, and JSON
    embedded within other text.

    Args:
        text: Text that may contain JSON

    Returns:
        Extracted JSON data as a Python dict/list or None if extraction fails
    """
    if not text:
        return None

    result = _loads_container(text.strip())
    if result is not None:
        return result

    fenced = _FENCE_PATTERN.search(text)
    if fenced:
        result = _loads_container(fenced.group(1).strip())
        if result is not None:
            return result

    match = _JSON_PATTERN.search(text)
    if match:
        return _loads_container(match.group(0))

    return None


def format_json(data: Any, indent: int = 2) -> str:
    """Format Python data as pretty-printed JSON.

    Values that are not JSON-serializable (datetimes, enums) are rendered
    with ``str``.

    Args:
        data: Data to format as JSON
        indent: Number of spaces for indentation

    Returns:
        Formatted JSON string
    """
    return json.dumps(data, indent=indent, ensure_ascii=False, default=str)
