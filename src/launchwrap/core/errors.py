"""
Exception hierarchy for launchwrap.

Errors fall into three families that the CLI maps to distinct exit codes:

- LaunchConfigurationError: the launch line or environment describes
  something launchwrap refuses to run (fatal, never retried).
- LauncherSetupError: an I/O problem while preparing or starting a process
  (unreadable argfile, missing or non-executable build tool).
- LaunchInterruptedError: the launch was cancelled by a signal or by the IDE.
"""

from __future__ import annotations

from pathlib import Path


class LauncherError(Exception):
    """Base exception for launchwrap errors."""


# ============================================================================
# Configuration errors
# ============================================================================


class LaunchConfigurationError(LauncherError):
    """The launch configuration cannot be executed."""


class UnsupportedDebugTransportError(LaunchConfigurationError):
    """JDWP transport other than dt_socket was requested."""

    def __init__(self, transport: str) -> None:
        self.transport = transport
        super().__init__(
            f"Only socket transport is supported for debugging, got '{transport}'. "
            "Use transport=dt_socket."
        )


class InvalidDebugAddressError(LaunchConfigurationError):
    """JDWP address could not be parsed into host and port."""

    def __init__(self, address: str) -> None:
        self.address = address
        super().__init__(f"Invalid debug address '{address}': expected <port> or <host>:<port>")


class MissingScriptDirectoryError(LaunchConfigurationError):
    """Gradle launch requested without the init-script directory variable."""

    def __init__(self, variable: str) -> None:
        self.variable = variable
        super().__init__(f"Gradle launch requires the {variable} environment variable")


# ============================================================================
# Setup (I/O) errors
# ============================================================================


class LauncherSetupError(LauncherError):
    """I/O failure while preparing or starting a process."""


class ArgumentFileError(LauncherSetupError):
    """An @argfile could not be read."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot read argument file {path}: {reason}")


class ExecutableNotFoundError(LauncherSetupError):
    """No build-tool executable (wrapper, tool home or PATH) was found."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(
            f"Cannot find '{name}': no wrapper script in the project, "
            f"no tool home variable and nothing on PATH"
        )


class ExecutableNotRunnableError(LauncherSetupError):
    """A build-tool executable exists but is not executable."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"File {path} is not executable")


class ProcessStartError(LauncherSetupError):
    """The operating system refused to start a process."""

    def __init__(self, argv: list[str], reason: str) -> None:
        self.argv = argv
        super().__init__(f"Cannot start {argv[0] if argv else '<empty command>'}: {reason}")


# ============================================================================
# Interruption
# ============================================================================


class LaunchInterruptedError(LauncherError):
    """The launch was cancelled before the process finished on its own."""


__all__ = [
    "LauncherError",
    "LaunchConfigurationError",
    "UnsupportedDebugTransportError",
    "InvalidDebugAddressError",
    "MissingScriptDirectoryError",
    "LauncherSetupError",
    "ArgumentFileError",
    "ExecutableNotFoundError",
    "ExecutableNotRunnableError",
    "ProcessStartError",
    "LaunchInterruptedError",
]
