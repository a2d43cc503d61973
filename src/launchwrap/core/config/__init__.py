"""
Configuration for launchwrap.

Launch configuration is read from environment variables set by the IDE
(all under the JDT_LAUNCHWRAP_ prefix) and from the JVM-style launch line.

Modules:
    env: Environment variable names and child-environment filtering
    models: Pydantic models (LauncherSettings, DebugSettings, LaunchConfiguration)
"""

from launchwrap.core.config.env import (
    ENV_PREFIX,
    filter_environment,
)
from launchwrap.core.config.models import (
    DebugSettings,
    LaunchConfiguration,
    LauncherSettings,
)

__all__ = [
    "ENV_PREFIX",
    "filter_environment",
    "DebugSettings",
    "LaunchConfiguration",
    "LauncherSettings",
]
