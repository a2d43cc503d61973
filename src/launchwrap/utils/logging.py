"""
Diagnostic event log for launchwrap.

The launcher runs headless under an IDE, so stderr is often invisible. Every
significant step (resolved project, composed command lines, process start
and exit, tree teardown) is appended as one JSON line to a log file in the
system temp directory. The file is advisory only: it is never read back, has
no rotation and a failed write never interrupts a launch.

Each log line has the format:
{
  "timestamp": "2026-01-15T12:34:56.789Z",
  "event_type": "command",
  "data": { ... event-specific data ... }
}
"""

import logging
import os
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """Types of events that can be logged."""

    PROJECT_RESOLVED = "project_resolved"
    COMMAND = "command"
    PRE_STEP = "pre_step"
    PROCESS_STARTED = "process_started"
    PROCESS_EXITED = "process_exited"
    CANCELLED = "cancelled"
    KILL_TREE = "kill_tree"
    DESTROY = "destroy"
    DESTROY_FAILED = "destroy_failed"
    WATCHDOG = "watchdog"
    ERROR = "error"


class LogEntry(BaseModel):
    """A single structured log entry in JSONL format."""

    model_config = ConfigDict(use_enum_values=True)

    timestamp: datetime = Field(..., description="When the event occurred (ISO 8601 format)")
    pid: int = Field(..., description="Process that wrote the entry")
    event_type: EventType = Field(..., description="Type of event")
    data: dict[str, Any] = Field(default_factory=dict, description="Event-specific data")


class LaunchLogger:
    """
    Append-only JSONL event sink.

    Passed explicitly to the builder, launchers and process-tree helpers. A
    logger created with ``log_file=None`` discards events, which is what
    tests and ``--no-log-file`` use.

    Example:
        events = LaunchLogger(Path("/tmp/launchwrap.log"))
        events.log_event(EventType.COMMAND, {"argv": ["mvn", "install"]})
    """

    def __init__(self, log_file: Optional[Path]):
        """
        Initialize logger with a log file path.

        Args:
            log_file: Path to the JSONL log file, or None to disable the sink
        """
        self.log_file = Path(log_file) if log_file is not None else None

    @classmethod
    def disabled(cls) -> "LaunchLogger":
        """Create a logger that drops every event."""
        return cls(None)

    @property
    def enabled(self) -> bool:
        return self.log_file is not None

    def log_event(self, event_type: EventType, data: Optional[dict[str, Any]] = None) -> None:
        """
        Append an event to the log file.

        Write errors are reported through the standard logger and otherwise
        ignored.

        Args:
            event_type: Type of event (from EventType enum)
            data: Event-specific data (optional, defaults to {})
        """
        if self.log_file is None:
            return
        if data is None:
            data = {}

        try:
            entry = LogEntry(
                timestamp=datetime.now(timezone.utc),
                pid=os.getpid(),
                event_type=event_type,
                data=data,
            )
            log_line = entry.model_dump_json(exclude_none=True) + "\n"

            self.log_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.log_file, "a", encoding="utf-8") as f:
                f.write(log_line)

        except OSError as e:
            logger.warning("Failed to write to log file %s: %s", self.log_file, e)

    def log_command(self, argv: list[str], cwd: Optional[Path], *, step: str = "run") -> None:
        """
        Log a composed command line before it is started.

        Args:
            argv: Full command line
            cwd: Working directory of the process
            step: Which launch step the command belongs to ("run" or "install")
        """
        self.log_event(
            EventType.COMMAND,
            {"step": step, "argv": list(argv), "cwd": str(cwd) if cwd else None},
        )

    def log_process_exit(self, pid: int, exit_code: int) -> None:
        """Log the exit of a supervised process."""
        self.log_event(EventType.PROCESS_EXITED, {"pid": pid, "exit_code": exit_code})

    def log_error(self, error_type: str, message: str) -> None:
        """
        Log an error that ended the launch.

        Args:
            error_type: Exception class name
            message: Human-readable error message
        """
        self.log_event(EventType.ERROR, {"error_type": error_type, "message": message})
