"""Date and time calculation tool.

All dates are handled in UTC. Inputs are ISO-8601 strings (a trailing ``Z``
is accepted, naive values are taken as UTC); outputs are ISO-8601 strings
with a ``Z`` suffix.
"""

from datetime import datetime, timedelta, timezone
from typing import Optional

from ..decorators import param, tool
from ..models import ToolResult

UNIT_SECONDS = {
    "seconds": 1,
    "minutes": 60,
    "hours": 60 * 60,
    "days": 24 * 60 * 60,
}


def parse_iso_datetime(value: str) -> Optional[datetime]:
    """Parse an ISO-8601 string into an aware UTC datetime, or None if invalid."""
    text = value.strip()
    if text.endswith("Z") or text.endswith("z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_iso_z(value: datetime) -> str:
    """Format an aware datetime as ``YYYY-MM-DDTHH:MM:SSZ`` (milliseconds kept when present)."""
    value = value.astimezone(timezone.utc)
    timespec = "milliseconds" if value.microsecond else "seconds"
    return value.replace(tzinfo=None).isoformat(timespec=timespec) + "Z"


@tool(
    name="calculate_date",
    description="Performs date calculations like adding/subtracting days, formatting, or finding differences",
    parameters=[
        param("operation", "string", "Operation: add, subtract, difference, format, now", required=True),
        param("date", "string", "Base date in ISO format (optional for 'now' operation)"),
        param("amount", "number", "Amount to add/subtract"),
        param("unit", "string", "Unit: days, hours, minutes, seconds", default="days"),
        param("end_date", "string", "End date for difference calculation"),
    ],
)
async def calculate_date(params: dict) -> ToolResult:
    operation = params["operation"]
    unit = params.get("unit") or "days"

    now = datetime.now(timezone.utc)
    if operation == "now":
        return ToolResult.ok({
            "iso": to_iso_z(now),
            "unix": int(now.timestamp() * 1000),
            "formatted": now.strftime("%Y-%m-%d %H:%M:%S UTC"),
        })

    date_str = params.get("date")
    base_date = parse_iso_datetime(date_str) if date_str else now
    if base_date is None:
        return ToolResult.fail("Invalid date format")

    if operation in ("add", "subtract"):
        amount = params.get("amount")
        if amount is None:
            return ToolResult.fail("Amount is required for add/subtract")
        if isinstance(amount, bool) or not isinstance(amount, (int, float)):
            return ToolResult.fail("Amount must be a number")
        if unit not in UNIT_SECONDS:
            return ToolResult.fail(f"Unknown unit: {unit}. Available: {', '.join(UNIT_SECONDS)}")

        sign = 1 if operation == "add" else -1
        new_date = base_date + timedelta(seconds=sign * amount * UNIT_SECONDS[unit])
        return ToolResult.ok({
            "original": to_iso_z(base_date),
            "result": to_iso_z(new_date),
            "operation": operation,
            "amount": amount,
            "unit": unit,
        })

    if operation == "difference":
        end_str = params.get("end_date")
        if not end_str:
            return ToolResult.fail("End date is required for difference")
        end_date = parse_iso_datetime(end_str)
        if end_date is None:
            return ToolResult.fail("Invalid end date format")

        diff_ms = int((end_date - base_date).total_seconds() * 1000)
        return ToolResult.ok({
            "start_date": to_iso_z(base_date),
            "end_date": to_iso_z(end_date),
            "difference": {
                "milliseconds": diff_ms,
                "seconds": diff_ms // 1000,
                "minutes": diff_ms // (60 * 1000),
                "hours": diff_ms // (60 * 60 * 1000),
                "days": diff_ms // (24 * 60 * 60 * 1000),
            },
        })

    if operation == "format":
        return ToolResult.ok({
            "iso": to_iso_z(base_date),
            "utc": base_date.strftime("%a, %d %b %Y %H:%M:%S GMT"),
            "date": base_date.date().isoformat(),
            "time": base_date.strftime("%H:%M:%S"),
            "weekday": base_date.strftime("%A"),
        })

    return ToolResult.fail(f"Unknown operation: {operation}")
