"""Application settings."""

from .settings import LLMSettings, ResilienceSettings, TaskPilotSettings, load_settings

__all__ = ["LLMSettings", "ResilienceSettings", "TaskPilotSettings", "load_settings"]
