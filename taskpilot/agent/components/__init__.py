"""Agent components package."""
