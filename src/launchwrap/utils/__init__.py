"""Utility modules for launchwrap."""

from .logging import EventType, LaunchLogger, LogEntry

__all__ = [
    "EventType",
    "LaunchLogger",
    "LogEntry",
]
