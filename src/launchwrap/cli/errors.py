"""
Standardized error reporting and exit codes for the launchwrap CLI.

The launched program owns stdout, so every message here goes to stderr.
"""

from enum import IntEnum

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from launchwrap.core.errors import (
    LaunchConfigurationError,
    LauncherSetupError,
    LaunchInterruptedError,
)

console = Console(stderr=True)


class ExitCode(IntEnum):
    """Exit codes used when the launched program's own code is unavailable."""

    SUCCESS = 0
    """Operation completed successfully."""

    IO_ERROR = 126
    """I/O failure while preparing the launch (argfile, build tool, spawn)."""

    SIGINT = 130
    """Launch interrupted - Unix standard for SIGINT."""

    FAILURE = 255
    """Unsupported configuration or any other failure."""


def exit_code_for(error: BaseException) -> ExitCode:
    """Map an exception raised by a launch to its exit code."""
    if isinstance(error, LaunchInterruptedError):
        return ExitCode.SIGINT
    if isinstance(error, LauncherSetupError):
        return ExitCode.IO_ERROR
    return ExitCode.FAILURE


def print_error(
    problem: str,
    *,
    reason: str | None = None,
    solution: str | None = None,
) -> None:
    """
    Print a standardized error message with actionable guidance.

    Args:
        problem: Brief description of what went wrong
        reason: Optional explanation of why it happened
        solution: Optional action to fix it
    """
    text = Text()
    text.append("Error: ", style="bold red")
    text.append(problem)
    if reason:
        text.append("\n")
        text.append(reason, style="dim")
    if solution:
        text.append("\n→ Try: ", style="cyan")
        text.append(solution)
    console.print(
        Panel(
            text,
            title="[bold red]launchwrap[/bold red]",
            border_style="red",
            expand=False,
        )
    )


def print_launch_error(error: BaseException) -> None:
    """Print the message for an exception that ended a launch."""
    if isinstance(error, LaunchInterruptedError):
        console.print(f"[yellow]Interrupted:[/yellow] {error}")
    elif isinstance(error, LaunchConfigurationError):
        print_error(
            str(error),
            reason="The launch line or JDT_LAUNCHWRAP_* settings are not supported",
        )
    elif isinstance(error, LauncherSetupError):
        print_error(
            str(error),
            reason="The launch could not be prepared",
            solution="check the build tool installation and project directory",
        )
    else:
        print_error(str(error) or type(error).__name__)
