"""
Build-tool executable resolution.

A project-local wrapper script (mvnw, gradlew) always wins. Without one the
tool is looked up under its home variable (MAVEN_HOME, GRADLE_HOME) and
finally on the PATH of the launch environment.
"""

from __future__ import annotations

import os
import shutil
from collections.abc import Iterable, Mapping
from pathlib import Path

from launchwrap.core.errors import ExecutableNotFoundError, ExecutableNotRunnableError


def is_windows() -> bool:
    return os.name == "nt"


def os_executable(directory: Path, name: str) -> Path | None:
    """
    Find a script named *name* in *directory*.

    On Windows ``name.cmd`` and then ``name.bat`` are tried.

    Returns:
        The script path, or None if it does not exist

    Raises:
        ExecutableNotRunnableError: The file exists but is not executable
    """
    if is_windows():
        candidate = directory / f"{name}.cmd"
        if not candidate.exists():
            candidate = directory / f"{name}.bat"
    else:
        candidate = directory / name
    if not candidate.is_file():
        return None
    if not os.access(candidate, os.X_OK):
        raise ExecutableNotRunnableError(candidate)
    return candidate


def find_wrapper(name: str, directories: Iterable[Path | None]) -> Path | None:
    """Return the first wrapper script found in *directories*, in order."""
    for directory in directories:
        if directory is None:
            continue
        found = os_executable(directory, name)
        if found is not None:
            return found.absolute()
    return None


def resolve_build_tool(
    *,
    wrapper: str,
    tool: str,
    home_variable: str,
    directories: Iterable[Path | None],
    environment: Mapping[str, str],
) -> Path:
    """
    Resolve the executable for a build tool.

    Args:
        wrapper: Wrapper script name (e.g. "mvnw")
        tool: Tool name (e.g. "mvn")
        home_variable: Tool home variable (e.g. "MAVEN_HOME")
        directories: Directories searched for the wrapper, in order
        environment: Launch environment supplying the home variable and PATH

    Returns:
        Absolute path of the executable

    Raises:
        ExecutableNotFoundError: No wrapper, home installation or PATH entry
        ExecutableNotRunnableError: A candidate exists but is not executable
    """
    found = find_wrapper(wrapper, directories)
    if found is not None:
        return found

    home = environment.get(home_variable)
    if home:
        for directory in (Path(home) / "bin", Path(home)):
            in_home = os_executable(directory, tool)
            if in_home is not None:
                return in_home.absolute()

    on_path = shutil.which(tool, path=environment.get("PATH", os.environ.get("PATH", "")))
    if on_path:
        return Path(on_path).absolute()

    raise ExecutableNotFoundError(tool)


__all__ = ["find_wrapper", "is_windows", "os_executable", "resolve_build_tool"]
