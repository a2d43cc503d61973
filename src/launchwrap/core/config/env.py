"""Environment variables understood by launchwrap.

The IDE passes launch context through environment variables sharing the
``JDT_LAUNCHWRAP_`` prefix. None of them is ever forwarded to a spawned
process: :func:`filter_environment` strips the whole prefix.
"""

from __future__ import annotations

from collections.abc import Mapping

ENV_PREFIX = "JDT_LAUNCHWRAP_"

PROJECT_DIR = ENV_PREFIX + "PROJECT_DIR"
PROJECT_ROOT = ENV_PREFIX + "PROJECT_ROOT"
PROJECT_CWD = ENV_PREFIX + "CWD"
PROJECT_TYPE = ENV_PREFIX + "PROJECT_TYPE"
PROJECT_CONTAINER = ENV_PREFIX + "PROJECT_CONTAINER"
MICRONAUT_CONTINUOUS = ENV_PREFIX + "MICRONAUT_CONTINUOUS"
MAVEN_DEPENDENCIES = ENV_PREFIX + "MAVEN_DEPENDENCIES"
PROJECT_SCRIPTS = ENV_PREFIX + "PROJECT_SCRIPTS"
RUN_GOAL = ENV_PREFIX + "RUN_GOAL"
LOG_FILE = ENV_PREFIX + "LOG_FILE"

_FALSE_VALUES = {"false", "0", "no", "n", "off"}


def filter_environment(environment: Mapping[str, str]) -> dict[str, str]:
    """
    Copy an environment without launchwrap's own variables.

    Args:
        environment: Inherited process environment

    Returns:
        New dict with every ``JDT_LAUNCHWRAP_*`` key removed

    Example:
        >>> filter_environment({"PATH": "/bin", "JDT_LAUNCHWRAP_CWD": "/tmp"})
        {'PATH': '/bin'}
    """
    return {k: v for k, v in environment.items() if not k.startswith(ENV_PREFIX)}


def is_disabled(value: str | None) -> bool:
    """Whether a toggle variable explicitly switches a feature off."""
    if value is None:
        return False
    return value.strip().lower() in _FALSE_VALUES


__all__ = [
    "ENV_PREFIX",
    "PROJECT_DIR",
    "PROJECT_ROOT",
    "PROJECT_CWD",
    "PROJECT_TYPE",
    "PROJECT_CONTAINER",
    "MICRONAUT_CONTINUOUS",
    "MAVEN_DEPENDENCIES",
    "PROJECT_SCRIPTS",
    "RUN_GOAL",
    "LOG_FILE",
    "filter_environment",
    "is_disabled",
]
