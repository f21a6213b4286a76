"""Formatting utilities."""

from taskpilot.utils.formatting.json import extract_json, format_json

__all__ = [
    "extract_json",
    "format_json",
]
