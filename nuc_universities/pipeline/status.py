"""Scrape cycle status definitions."""

from enum import Enum


class CycleStatus(str, Enum):
    """Lifecycle of the orchestrator's scrape cycles."""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
