"""
Launch service: clean API for running one JVM launch line.

Orchestrates the whole flow: build the LaunchConfiguration, pick the
backend, run it under a ProcessSupervisor and report the exit code.

Usage:
    >>> from launchwrap.core.services.launch import LaunchService
    >>> service = LaunchService.from_environment()
    >>> exit_code = service.run("/usr/lib/jvm/bin/java", ["-cp", "app.jar", "Main"])
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping, Sequence
from pathlib import Path

from launchwrap.core.backends import Launcher, create_launcher
from launchwrap.core.config.models import LaunchConfiguration, LauncherSettings
from launchwrap.core.launch.builder import LaunchConfigurationBuilder
from launchwrap.core.process.supervisor import ProcessSupervisor
from launchwrap.utils.logging import LaunchLogger

logger = logging.getLogger(__name__)


def normalize_exit_code(exit_code: int) -> int:
    """
    Map a subprocess return code to a shell exit status.

    Popen reports death by signal N as -N; shells report it as 128+N.
    """
    if exit_code < 0:
        return 128 - exit_code
    return exit_code


# ============================================================================
# LaunchService
# ============================================================================


class LaunchService:
    """
    Service for translating and running a JVM launch line.

    Example:
        >>> service = LaunchService.from_environment()
        >>> config = service.configure("/opt/jdk/bin/java", ["Main"])
        >>> service.launcher_for(config).name
        'plain'
    """

    def __init__(
        self,
        environment: Mapping[str, str],
        events: LaunchLogger | None = None,
    ) -> None:
        """
        Initialize service with dependencies.

        Args:
            environment: Inherited environment (JDT_LAUNCHWRAP_* included)
            events: Diagnostic event sink
        """
        self._environment = dict(environment)
        self._events = events or LaunchLogger.disabled()

    @classmethod
    def from_environment(
        cls,
        environment: Mapping[str, str] | None = None,
        *,
        log_file: Path | None = None,
        log_events: bool = True,
    ) -> LaunchService:
        """
        Create a service from a process environment.

        Args:
            environment: Environment to use (os.environ if None)
            log_file: Event log override (JDT_LAUNCHWRAP_LOG_FILE otherwise)
            log_events: Whether to write the diagnostic event log at all

        Returns:
            Configured LaunchService instance
        """
        if environment is None:
            environment = os.environ
        events = LaunchLogger.disabled()
        if log_events:
            if log_file is None:
                log_file = LauncherSettings.from_environment(environment).log_file
            events = LaunchLogger(log_file)
        return cls(environment, events)

    @property
    def environment(self) -> dict[str, str]:
        return self._environment

    @property
    def events(self) -> LaunchLogger:
        return self._events

    # ============================================================================
    # Launch methods
    # ============================================================================

    def configure(
        self,
        jvm_binary: str,
        args: Sequence[str],
        project_dir: Path | None = None,
    ) -> LaunchConfiguration:
        """
        Build the launch configuration.

        Raises:
            ArgumentFileError: An @argfile could not be read
            LaunchConfigurationError: The launch line is not supported
        """
        builder = LaunchConfigurationBuilder(
            jvm_binary, args, self._environment, events=self._events
        )
        if project_dir is not None:
            builder.set_project_dir(project_dir)
        return builder.build()

    def launcher_for(
        self,
        config: LaunchConfiguration,
        supervisor: ProcessSupervisor | None = None,
    ) -> Launcher:
        """Create and configure the backend launcher for a configuration."""
        launcher = create_launcher(config, supervisor=supervisor, events=self._events)
        logger.debug("Selected %s launcher", launcher.name)
        return launcher.configure()

    def run(
        self,
        jvm_binary: str,
        args: Sequence[str],
        project_dir: Path | None = None,
    ) -> int:
        """
        Run a launch line to completion.

        Signals received while the launch runs cancel it: the backend's
        process tree is terminated and LaunchInterruptedError is raised.

        Args:
            jvm_binary: Runtime binary the IDE meant to start
            args: Launch line after the binary
            project_dir: Project directory override

        Returns:
            Exit code of the launched program, normalized for the shell

        Raises:
            LaunchConfigurationError: Unsupported launch line or settings
            LauncherSetupError: I/O failure before the program started
            LaunchInterruptedError: The launch was cancelled
        """
        config = self.configure(jvm_binary, args, project_dir)
        with ProcessSupervisor(events=self._events) as supervisor:
            launcher = self.launcher_for(config, supervisor)
            exit_code = launcher.execute()
        return normalize_exit_code(exit_code)


__all__ = ["LaunchService", "normalize_exit_code"]
