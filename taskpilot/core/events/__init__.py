"""Lifecycle events."""

from .events import AgentEvent, EventBus, EventHandler, EventType

__all__ = ["AgentEvent", "EventBus", "EventHandler", "EventType"]
