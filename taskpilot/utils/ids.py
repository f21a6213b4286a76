"""Prefixed identifier generation.

Identifiers look like ``task_3f9c0a1b2d4e``: a type prefix, an underscore
and twelve hex characters.
"""

import uuid
from typing import Literal, Optional

IdPrefix = Literal["task", "step", "tool", "event"]

PREFIXES: dict[str, str] = {
    "task": "task",
    "step": "step",
    "tool": "tool",
    "event": "evt",
}


def generate_id(prefix: IdPrefix) -> str:
    """Generate a unique id with a type-specific prefix."""
    return f"{PREFIXES[prefix]}_{uuid.uuid4().hex[:12]}"


def is_valid_id(value: str, prefix: Optional[IdPrefix] = None) -> bool:
    """Check that ``value`` carries the expected prefix (or any known one)."""
    if prefix is not None:
        return value.startswith(f"{PREFIXES[prefix]}_")
    return any(value.startswith(f"{p}_") for p in PREFIXES.values())


def get_id_prefix(value: str) -> Optional[str]:
    """Return the prefix kind of an id, or None if unrecognized."""
    for kind, p in PREFIXES.items():
        if value.startswith(f"{p}_"):
            return kind
    return None
