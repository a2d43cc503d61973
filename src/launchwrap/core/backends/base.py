"""
Backend launcher base class.

A Launcher turns a LaunchConfiguration into concrete process invocations for
one backend and runs them under a ProcessSupervisor. Subclasses override
build_command() (the translation) and execute() (the launch steps); process
start, waiting and cancellation live here.
"""

from __future__ import annotations

import logging
import subprocess
from abc import ABC, abstractmethod
from pathlib import Path
from typing import ClassVar

from launchwrap.core.config.models import LaunchConfiguration
from launchwrap.core.errors import LaunchInterruptedError, ProcessStartError
from launchwrap.core.launch.cmdline import ProcessSpec
from launchwrap.core.process.supervisor import CancellationToken, ProcessSupervisor
from launchwrap.core.process.tree import kill_tree
from launchwrap.utils.logging import EventType, LaunchLogger

logger = logging.getLogger(__name__)

# Time a cooperatively cancelled process gets before its tree is killed
TERMINATE_GRACE_PERIOD = 5.0
POLL_INTERVAL = 0.2


def resolve_java_home(jvm_binary_path: str) -> Path:
    """
    Derive the runtime home from the JVM binary.

    ``<home>/bin/java`` maps to ``<home>``; a JDK 8 style
    ``<jdk>/jre/bin/java`` maps to ``<jdk>``.

    Example:
        >>> resolve_java_home("/opt/jdk8/jre/bin/java")
        PosixPath('/opt/jdk8')
    """
    home = Path(jvm_binary_path).parent.parent
    if home.name == "jre":
        home = home.parent
    return home


class Launcher(ABC):
    """
    Base class for backend launchers.

    Attributes:
        name: Backend identifier used in logs
        config: Launch configuration, read-only for the launcher
        supervisor: Receives the launcher's cancellation callbacks
    """

    name: ClassVar[str] = "launcher"

    def __init__(
        self,
        config: LaunchConfiguration,
        *,
        supervisor: ProcessSupervisor | None = None,
        events: LaunchLogger | None = None,
    ) -> None:
        self.config = config
        self.supervisor = supervisor or ProcessSupervisor()
        self.events = events or LaunchLogger.disabled()

    def configure(self) -> Launcher:
        """Apply backend-specific defaults. Returns self for chaining."""
        return self

    @abstractmethod
    def build_command(self) -> ProcessSpec:
        """Compose the run-step process."""

    @abstractmethod
    def execute(self) -> int:
        """
        Run the launch and wait for it.

        Returns:
            Exit code of the launched process (or of a failed pre-step)

        Raises:
            LaunchInterruptedError: The launch was cancelled
            LauncherSetupError: A process could not be started
        """

    # -- shared helpers ------------------------------------------------------

    def java_home(self) -> Path:
        return resolve_java_home(self.config.jvm_binary_path)

    def child_environment(self) -> dict[str, str]:
        return self.config.child_environment()

    def start(self, spec: ProcessSpec, *, step: str = "run") -> subprocess.Popen[bytes]:
        """
        Start a process with inherited stdio.

        Raises:
            ProcessStartError: The OS could not start the process
        """
        argv = spec.command()
        logger.info("Running: %s", " ".join(argv))
        self.events.log_command(argv, spec.cwd, step=step)
        try:
            process = subprocess.Popen(argv, cwd=spec.cwd, env=spec.env)
        except OSError as e:
            raise ProcessStartError(argv, str(e)) from e
        self.events.log_event(EventType.PROCESS_STARTED, {"step": step, "pid": process.pid})
        return process

    def wait_destructive(self, process: subprocess.Popen[bytes]) -> int:
        """
        Wait for a process whose cancellation kills its whole tree.

        Raises:
            LaunchInterruptedError: Cancelled while waiting
        """
        self.supervisor.on_cancel(lambda: kill_tree(process, events=self.events))
        exit_code = process.wait()
        return self._finished(process, exit_code)

    def wait_cooperative(
        self,
        process: subprocess.Popen[bytes],
        token: CancellationToken | None = None,
    ) -> int:
        """
        Wait for a process that is stopped through a cancellation token.

        On cancellation the tree is asked to terminate; whatever is still
        alive after TERMINATE_GRACE_PERIOD is killed.

        Raises:
            LaunchInterruptedError: Cancelled while waiting
        """
        token = token or CancellationToken()
        self.supervisor.on_cancel(token.cancel)
        while (exit_code := process.poll()) is None:
            if token.wait(POLL_INTERVAL):
                self._stop(process)
                exit_code = process.returncode if process.returncode is not None else -1
                break
        if token.cancelled:
            self._interrupted(process)
        return self._finished(process, exit_code)

    def _stop(self, process: subprocess.Popen[bytes]) -> None:
        kill_tree(process, events=self.events)
        try:
            process.wait(timeout=TERMINATE_GRACE_PERIOD)
        except subprocess.TimeoutExpired:
            logger.info("Process %d ignored termination, killing", process.pid)
            kill_tree(process, force=True, events=self.events)
            process.wait()

    def _finished(self, process: subprocess.Popen[bytes], exit_code: int) -> int:
        if self.supervisor.cancelled:
            self._interrupted(process)
        logger.info("Child process %d exited with code %d", process.pid, exit_code)
        self.events.log_process_exit(process.pid, exit_code)
        return exit_code

    def _interrupted(self, process: subprocess.Popen[bytes]) -> None:
        raise LaunchInterruptedError(f"{self.name} launch cancelled (pid {process.pid})")


__all__ = ["Launcher", "resolve_java_home", "TERMINATE_GRACE_PERIOD"]
