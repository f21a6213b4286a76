"""Lifecycle events and the in-process event bus.

The orchestrator publishes an AgentEvent at every task and step transition.
Observers subscribe to an EventBus instance owned by the orchestrator; there
is no global broadcaster.
"""

import inspect
import logging
from datetime import datetime
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, List, Optional, Union

from pydantic import Field

from taskpilot.core.models import StrictBaseModel

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Recognized lifecycle event types."""
    TASK_CREATED = "task:created"
    TASK_STARTED = "task:started"
    TASK_PLANNING = "task:planning"
    TASK_PLANNED = "task:planned"
    STEP_STARTED = "step:started"
    STEP_COMPLETED = "step:completed"
    STEP_FAILED = "step:failed"
    TASK_COMPLETED = "task:completed"
    TASK_FAILED = "task:failed"


class AgentEvent(StrictBaseModel):
    """Immutable, purely informational lifecycle event."""

    type: EventType = Field(..., description="Event type")
    task_id: str = Field(..., description="Task the event belongs to")
    timestamp: datetime = Field(default_factory=datetime.now, description="When the event was emitted")
    data: Dict[str, Any] = Field(default_factory=dict, description="Event payload")


EventHandler = Callable[[AgentEvent], Union[None, Awaitable[None]]]


class EventBus:
    """Observer collection dispatching events to handlers in registration order.

    Handlers may be plain functions or coroutine functions. Each handler is
    awaited before the next one runs; a failing handler is logged and never
    affects the publisher or the remaining handlers.
    """

    def __init__(self) -> None:
        self._handlers: List[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """Register a handler.

        Args:
            handler: Callable receiving every emitted AgentEvent

        Returns:
            Zero-argument callable that removes this registration
        """
        self._handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._handlers:
                self._handlers.remove(handler)

        return unsubscribe

    async def emit(self, event: AgentEvent) -> None:
        """Dispatch an event to every handler registered at call time."""
        for handler in list(self._handlers):
            try:
                outcome = handler(event)
                if inspect.isawaitable(outcome):
                    await outcome
            except Exception as e:
                logger.error(
                    f"Event handler error for {event.type.value} (task {event.task_id}): {e}",
                    exc_info=True,
                )

    async def publish(
        self,
        event_type: EventType,
        task_id: str,
        data: Optional[Dict[str, Any]] = None,
    ) -> AgentEvent:
        """Build an event stamped with the current time and emit it."""
        event = AgentEvent(type=event_type, task_id=task_id, data=data or {})
        await self.emit(event)
        return event

    @property
    def handler_count(self) -> int:
        return len(self._handlers)

    def clear(self) -> None:
        """Remove every handler."""
        self._handlers.clear()

    def get_stats(self) -> Dict[str, Any]:
        """Get event bus statistics."""
        return {"handlers": len(self._handlers)}
