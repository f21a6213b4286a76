"""Logging setup and structured logging helpers.

Modules log through ``logging.getLogger(__name__)``. The helpers below attach
task, step and tool fields through ``extra`` so handlers that understand
structured records can pick them up, while the message itself stays readable.
"""

import logging
import sys
from typing import Any, Dict, Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

NOISY_LOGGERS = ("httpx", "httpcore", "openai")

_task_logger = logging.getLogger("taskpilot.tasks")
_tool_logger = logging.getLogger("taskpilot.tools")


def configure_logging(level: Union[str, int] = "INFO") -> None:
    """Set up application logging on stdout."""
    logging.basicConfig(
        level=level if isinstance(level, int) else level.upper(),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Set specific loggers to appropriate levels
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def log_task_event(task_id: str, event: str, data: Optional[Dict[str, Any]] = None) -> None:
    """Log a task lifecycle event."""
    fields = {"task_id": task_id, "event": event, **(data or {})}
    details = ", ".join(f"{k}={v}" for k, v in (data or {}).items())
    _task_logger.info(
        f"Task event: {event} [{task_id}]" + (f" ({details})" if details else ""),
        extra={"taskpilot": fields},
    )


def log_step_event(task_id: str, step_id: str, event: str, data: Optional[Dict[str, Any]] = None) -> None:
    """Log a step lifecycle event."""
    fields = {"task_id": task_id, "step_id": step_id, "event": event, **(data or {})}
    details = ", ".join(f"{k}={v}" for k, v in (data or {}).items())
    _task_logger.info(
        f"Step event: {event} [{task_id}/{step_id}]" + (f" ({details})" if details else ""),
        extra={"taskpilot": fields},
    )


def log_tool_execution(tool_name: str, params: Dict[str, Any], success: bool, duration_ms: float) -> None:
    """Log a tool execution; failures are logged as warnings."""
    level = logging.INFO if success else logging.WARNING
    _tool_logger.log(
        level,
        f"Tool execution: {tool_name} (success={success}, duration={duration_ms:.1f}ms)",
        extra={
            "taskpilot": {
                "tool": tool_name,
                "params": list(params),
                "success": success,
                "duration_ms": duration_ms,
            }
        },
    )


def log_llm_call(model: str, prompt_tokens: int, completion_tokens: int, duration_ms: float) -> None:
    """Log a completed LLM call."""
    logging.getLogger("taskpilot.llm").info(
        f"LLM call completed in {duration_ms:.0f}ms (model={model}, "
        f"prompt_tokens={prompt_tokens}, completion_tokens={completion_tokens})",
        extra={
            "taskpilot": {
                "model": model,
                "prompt_tokens": prompt_tokens,
                "completion_tokens": completion_tokens,
                "duration_ms": duration_ms,
            }
        },
    )
