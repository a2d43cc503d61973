"""
Cancellation handling around a running launch.

ProcessSupervisor turns SIGINT/SIGTERM (and the IDE's programmatic cancel)
into cleanup callbacks. Launchers register what cancellation means for them:
subprocess backends kill the whole process tree, cooperative backends set a
CancellationToken that their wait loop observes.

The handler implements a two-stage interrupt model:
1. First interrupt: marks the supervisor cancelled and runs cleanup callbacks
2. Second interrupt: force exits with SystemExit(130)

Usage:
    >>> with ProcessSupervisor() as supervisor:
    ...     process = subprocess.Popen(argv)
    ...     supervisor.on_cancel(lambda: kill_tree(process))
    ...     exit_code = process.wait()
    ...     if supervisor.cancelled:
    ...         raise LaunchInterruptedError()
"""

from __future__ import annotations

import logging
import signal
import sys
import threading
from collections.abc import Callable
from typing import Any

from launchwrap.utils.logging import EventType, LaunchLogger

logger = logging.getLogger(__name__)


def _supervised_signals() -> list[signal.Signals]:
    names = ["SIGINT", "SIGTERM", "SIGHUP", "SIGBREAK"]
    return [getattr(signal, name) for name in names if hasattr(signal, name)]


class CancellationToken:
    """Cooperative cancellation flag, safe to set from any thread."""

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float | None = None) -> bool:
        """Block until cancelled or the timeout elapses; returns cancelled."""
        return self._event.wait(timeout)


class ProcessSupervisor:
    """
    Runs cleanup callbacks when a launch is cancelled.

    Cancellation may come from a signal (handled on the main thread) or from
    another thread calling :meth:`cancel`. Callbacks run at most once each,
    in registration order; a callback registered after cancellation runs
    immediately.

    Attributes:
        cancelled: Whether cancellation was requested
    """

    def __init__(self, *, events: LaunchLogger | None = None) -> None:
        """
        Initialize the supervisor with no callbacks.

        Args:
            events: Diagnostic event sink
        """
        self._events = events or LaunchLogger.disabled()
        self._cancelled = False
        # Set by the signal handler, which must never wait for _lock
        self._signalled = False
        self._lock = threading.Lock()
        self._callbacks: list[Callable[[], None]] = []
        self._original_handlers: dict[int, Any] = {}

    @property
    def cancelled(self) -> bool:
        return self._cancelled or self._signalled

    def on_cancel(self, callback: Callable[[], None]) -> None:
        """
        Register a cleanup callback.

        Args:
            callback: Called without arguments when the launch is cancelled
        """
        with self._lock:
            registered = not self._cancelled
            if registered:
                self._callbacks.append(callback)
        if not registered:
            self._run_callback(callback)
        elif self._signalled:
            # A signal arrived while the lock was held here
            self.cancel()

    def cancel(self) -> None:
        """Request cancellation and run pending callbacks (idempotent)."""
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            callbacks, self._callbacks = self._callbacks, []

        logger.info("Launch cancelled, running %d cleanup callback(s)", len(callbacks))
        self._events.log_event(EventType.CANCELLED, {"callbacks": len(callbacks)})
        for callback in callbacks:
            self._run_callback(callback)

    def _run_callback(self, callback: Callable[[], None]) -> None:
        try:
            callback()
        except Exception:
            # Cleanup is best effort; one failing callback must not stop the rest
            logger.warning("Cleanup callback failed", exc_info=True)

    # -- signal handling -----------------------------------------------------

    def register(self) -> None:
        """
        Install signal handlers.

        Signal handlers can only be installed from the main thread; elsewhere
        this is a no-op and only :meth:`cancel` triggers cleanup.
        """
        if threading.current_thread() is not threading.main_thread():
            logger.debug("Not on the main thread, signal handlers not installed")
            return
        for sig in _supervised_signals():
            self._original_handlers[sig] = signal.signal(sig, self._handle_signal)

    def unregister(self) -> None:
        """Restore the signal handlers saved by :meth:`register`."""
        for sig, handler in self._original_handlers.items():
            signal.signal(sig, handler)
        self._original_handlers = {}

    def _handle_signal(self, signum: int, frame: object) -> None:
        if self.cancelled:
            # Second interrupt - force exit, finally blocks still run
            sys.stderr.write("\n[Force exiting...]\n")
            sys.stderr.flush()
            raise SystemExit(130)
        logger.info("Received signal %d", signum)
        self._signalled = True
        # The interrupted main thread may itself hold _lock inside on_cancel()
        if self._lock.acquire(blocking=False):
            self._lock.release()
            self.cancel()

    def __enter__(self) -> ProcessSupervisor:
        self.register()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.unregister()


__all__ = ["CancellationToken", "ProcessSupervisor"]
