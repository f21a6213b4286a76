"""Tests for lifecycle events and the event bus."""

import logging
from datetime import datetime

import pytest
from pydantic import ValidationError

from taskpilot.core.events.events import AgentEvent, EventBus, EventType


class TestAgentEvent:
    """Test AgentEvent model."""

    def test_event_creation(self):
        """Test creating an event with defaults."""
        event = AgentEvent(type=EventType.TASK_CREATED, task_id="task_1")

        assert event.type == EventType.TASK_CREATED
        assert event.task_id == "task_1"
        assert event.data == {}
        assert isinstance(event.timestamp, datetime)

    def test_event_is_immutable(self):
        """Test that events cannot be modified after creation."""
        event = AgentEvent(type=EventType.STEP_STARTED, task_id="task_1", data={"step_id": "step_1"})

        with pytest.raises(ValidationError):
            event.task_id = "task_2"

    def test_event_type_values(self):
        """Test the recognized event type strings."""
        assert [e.value for e in EventType] == [
            "task:created",
            "task:started",
            "task:planning",
            "task:planned",
            "step:started",
            "step:completed",
            "step:failed",
            "task:completed",
            "task:failed",
        ]


class TestEventBus:
    """Test EventBus dispatching."""

    @pytest.mark.asyncio
    async def test_handlers_called_in_registration_order(self):
        """Test that every handler receives the event in order."""
        bus = EventBus()
        calls = []
        bus.subscribe(lambda e: calls.append(("first", e.type)))
        bus.subscribe(lambda e: calls.append(("second", e.type)))

        await bus.publish(EventType.TASK_STARTED, "task_1")

        assert calls == [("first", EventType.TASK_STARTED), ("second", EventType.TASK_STARTED)]

    @pytest.mark.asyncio
    async def test_async_handler_awaited(self):
        """Test coroutine handlers are awaited before the next handler."""
        bus = EventBus()
        order = []

        async def slow_handler(event):
            order.append("async")

        bus.subscribe(slow_handler)
        bus.subscribe(lambda e: order.append("sync"))

        await bus.publish(EventType.TASK_PLANNED, "task_1", {"step_count": 2})

        assert order == ["async", "sync"]

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        """Test that the returned callable removes the handler."""
        bus = EventBus()
        received = []
        unsubscribe = bus.subscribe(received.append)

        await bus.publish(EventType.TASK_CREATED, "task_1")
        unsubscribe()
        await bus.publish(EventType.TASK_STARTED, "task_1")

        assert len(received) == 1
        assert bus.handler_count == 0

    @pytest.mark.asyncio
    async def test_unsubscribe_twice_is_harmless(self):
        """Test calling unsubscribe more than once."""
        bus = EventBus()
        unsubscribe = bus.subscribe(lambda e: None)

        unsubscribe()
        unsubscribe()

        assert bus.handler_count == 0

    @pytest.mark.asyncio
    async def test_failing_handler_is_isolated(self, caplog):
        """Test that a failing handler is logged and does not stop others."""
        bus = EventBus()
        received = []

        def broken(event):
            raise RuntimeError("handler exploded")

        bus.subscribe(broken)
        bus.subscribe(received.append)

        with caplog.at_level(logging.ERROR):
            event = await bus.publish(EventType.STEP_FAILED, "task_1", {"step_id": "step_1"})

        assert received == [event]
        assert "handler exploded" in caplog.text

    @pytest.mark.asyncio
    async def test_failing_async_handler_is_isolated(self):
        """Test that a failing coroutine handler does not propagate."""
        bus = EventBus()

        async def broken(event):
            raise ValueError("async failure")

        bus.subscribe(broken)

        await bus.publish(EventType.TASK_FAILED, "task_1")

    @pytest.mark.asyncio
    async def test_publish_returns_event(self):
        """Test that publish builds and returns the emitted event."""
        bus = EventBus()

        event = await bus.publish(EventType.TASK_COMPLETED, "task_9", {"result": {}})

        assert event.type == EventType.TASK_COMPLETED
        assert event.task_id == "task_9"
        assert event.data == {"result": {}}

    def test_clear_and_stats(self):
        """Test clearing handlers and reading stats."""
        bus = EventBus()
        bus.subscribe(lambda e: None)
        bus.subscribe(lambda e: None)

        assert bus.get_stats() == {"handlers": 2}
        bus.clear()
        assert bus.handler_count == 0
