"""
Out-of-process watchdog for platforms that orphan process trees.

On Windows the IDE terminates the launcher without running its signal
handlers, so the build tool and the application it started keep running.
The launcher therefore starts this module as a companion process right
after the run step starts:

    python -m launchwrap.core.process.watchdog

The watchdog snapshots the descendants of its parent (the launcher),
excluding itself, and then waits. If every snapshotted process exits on its
own, the watchdog exits too. If the launcher dies first, the watchdog waits
a short grace period, expands the snapshot to each survivor's descendants
and force-terminates all of them.
"""

from __future__ import annotations

import logging
import os
import subprocess
import sys
import time
from collections.abc import Callable

import psutil

from launchwrap.core.config import env as envvars
from launchwrap.core.config.models import LauncherSettings
from launchwrap.core.process.tree import descendants, destroy, is_alive
from launchwrap.utils.logging import EventType, LaunchLogger

logger = logging.getLogger(__name__)

GRACE_PERIOD = 2.0
POLL_INTERVAL = 0.5

WATCHDOG_MODULE = "launchwrap.core.process.watchdog"


def needs_watchdog(platform: str | None = None) -> bool:
    """Whether the platform needs an out-of-process tree watchdog."""
    return (platform or sys.platform) == "win32"


class Watchdog:
    """
    Watches a snapshot of processes on behalf of a parent process.

    Example:
        >>> watchdog = Watchdog.for_current_process()
        >>> sys.exit(watchdog.run())
    """

    def __init__(
        self,
        parent: psutil.Process,
        snapshot: list[psutil.Process],
        *,
        grace_period: float = GRACE_PERIOD,
        poll_interval: float = POLL_INTERVAL,
        events: LaunchLogger | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.parent = parent
        self.snapshot = list(snapshot)
        self.grace_period = grace_period
        self.poll_interval = poll_interval
        self._events = events or LaunchLogger.disabled()
        self._sleep = sleep

    @classmethod
    def for_current_process(cls, **kwargs: object) -> Watchdog:
        """
        Snapshot the current parent's descendants, excluding this process.

        Raises:
            RuntimeError: No parent process, or nothing to watch
        """
        current = psutil.Process()
        parent = current.parent()
        if parent is None:
            raise RuntimeError("Watchdog started without a parent process")
        snapshot = [p for p in descendants(parent) if p.pid != current.pid]
        if not snapshot:
            raise RuntimeError("No processes to watch")
        return cls(parent, snapshot, **kwargs)  # type: ignore[arg-type]

    def run(self) -> int:
        """
        Wait until the snapshot exits or the parent dies.

        Returns:
            Exit code for the watchdog process (always 0)
        """
        self._events.log_event(
            EventType.WATCHDOG,
            {"parent": self.parent.pid, "watching": [p.pid for p in self.snapshot]},
        )
        remaining = list(self.snapshot)
        while remaining:
            _, remaining = psutil.wait_procs(remaining, timeout=self.poll_interval)
            if not remaining:
                break
            if not is_alive(self.parent):
                logger.info("Parent %d exited, terminating watched processes", self.parent.pid)
                self._sleep(self.grace_period)
                self.terminate(remaining)
                break
        return 0

    def terminate(self, processes: list[psutil.Process]) -> list[int]:
        """
        Force-terminate processes and their live descendants.

        Returns:
            Pids that received a kill request
        """
        targets = list(processes)
        for proc in processes:
            targets.extend(descendants(proc))
        return [p.pid for p in targets if destroy(p, force=True, events=self._events)]


def spawn_watchdog(settings: LauncherSettings | None = None) -> subprocess.Popen[bytes] | None:
    """
    Start the watchdog companion (fire and forget).

    Must be called after the supervised process has started, because the
    watchdog snapshots its parent's descendants on startup.

    Returns:
        The watchdog process, or None if it could not be started
    """
    env = dict(os.environ)
    if settings is not None:
        env[envvars.LOG_FILE] = str(settings.log_file)
    try:
        return subprocess.Popen(
            [sys.executable, "-m", WATCHDOG_MODULE],
            stdin=subprocess.DEVNULL,
            env=env,
        )
    except OSError as e:
        logger.warning("Could not start process watchdog: %s", e)
        return None


def main() -> int:
    """Entry point of the watchdog process."""
    settings = LauncherSettings.from_environment(os.environ)
    events = LaunchLogger(settings.log_file)
    try:
        watchdog = Watchdog.for_current_process(events=events)
    except RuntimeError as e:
        events.log_error(type(e).__name__, str(e))
        sys.stderr.write(f"watchdog: {e}\n")
        return 1
    return watchdog.run()


__all__ = [
    "GRACE_PERIOD",
    "POLL_INTERVAL",
    "Watchdog",
    "needs_watchdog",
    "spawn_watchdog",
]


if __name__ == "__main__":
    sys.exit(main())
