"""HTTP request tool.

Requests are simulated: the tool echoes the request back with a canned
response and performs no network I/O.
"""

from ..decorators import param, tool
from ..models import ToolResult

ALLOWED_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")


@tool(
    name="http_request",
    description="Makes HTTP requests to external APIs (simulated in demo mode)",
    parameters=[
        param("method", "string", "HTTP method: GET, POST, PUT, PATCH, DELETE", required=True),
        param("url", "string", "The URL to request", required=True),
        param("headers", "object", "Request headers"),
        param("body", "object", "Request body for POST/PUT"),
    ],
)
async def http_request(params: dict) -> ToolResult:
    method = str(params["method"]).upper()
    if method not in ALLOWED_METHODS:
        return ToolResult.fail(f"Unsupported HTTP method: {method}")

    return ToolResult.ok({
        "simulated": True,
        "request": {
            "method": method,
            "url": params["url"],
            "headers": params.get("headers"),
            "body": params.get("body"),
        },
        "response": {
            "status": 200,
            "message": "This is a simulated response for demo purposes",
        },
    })
