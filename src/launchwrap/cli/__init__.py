"""
launchwrap CLI - main application entry point.

    launchwrap [OPTIONS] JAVA [LAUNCH-LINE...]

JAVA is the runtime binary the IDE wanted to start and LAUNCH-LINE its
arguments (``@argfile`` references allowed). The exit code is the launched
program's, or 126 for setup I/O failures, 130 when interrupted and 255 for
anything else.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from launchwrap import __version__
from launchwrap.cli.argv import preprocess_argv
from launchwrap.cli.errors import ExitCode, console, exit_code_for, print_launch_error
from launchwrap.core.errors import LauncherError
from launchwrap.core.services.launch import LaunchService

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="launchwrap",
    help="Run a JVM launch line through a plain JVM, Maven or Gradle",
    add_completion=False,
    context_settings={"help_option_names": ["--help", "-h"]},
)


def setup_logging(debug: bool = False) -> None:
    """
    Configure logging for the launcher.

    Args:
        debug: If True, enable DEBUG level logging
    """
    level = logging.DEBUG if debug else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"launchwrap version: {__version__}")
        raise typer.Exit()


@app.command()
def main(
    jvm_binary: str = typer.Argument(
        ...,
        metavar="JAVA",
        help="Runtime binary the IDE meant to start",
    ),
    launch_line: Optional[list[str]] = typer.Argument(
        None,
        metavar="LAUNCH-LINE...",
        help="JVM arguments, main class and program arguments",
    ),
    debug: bool = typer.Option(
        False,
        "--debug",
        help="Enable debug output with detailed logging and tracebacks",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Diagnostic event log (default: JDT_LAUNCHWRAP_LOG_FILE or temp dir)",
    ),
    no_log_file: bool = typer.Option(
        False,
        "--no-log-file",
        help="Do not write the diagnostic event log",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
) -> None:
    """
    Translate a JVM launch line for the project's build system and run it.

    The backend is selected by JDT_LAUNCHWRAP_PROJECT_TYPE (maven, gradle,
    unset for a plain JVM) and JDT_LAUNCHWRAP_PROJECT_CONTAINER (micronaut).
    """
    setup_logging(debug)
    service = LaunchService.from_environment(log_file=log_file, log_events=not no_log_file)

    try:
        exit_code = service.run(jvm_binary, launch_line or [])
    except LauncherError as e:
        service.events.log_error(type(e).__name__, str(e))
        print_launch_error(e)
        if debug:
            console.print_exception()
        raise typer.Exit(int(exit_code_for(e)))
    except Exception as e:
        logger.exception("Launch failed")
        service.events.log_error(type(e).__name__, str(e))
        print_launch_error(e)
        raise typer.Exit(int(ExitCode.FAILURE))

    raise typer.Exit(exit_code)


def cli_main() -> None:
    """Entry point that preprocesses argv before Typer parses it."""
    sys.argv[1:] = preprocess_argv(sys.argv[1:])
    app()


__all__ = ["app", "cli_main", "main", "setup_logging"]
