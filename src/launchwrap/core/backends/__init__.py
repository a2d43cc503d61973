"""
Backend launchers.

Each backend translates the shared LaunchConfiguration into its own command
line dialect:

    plain: the JVM itself
    maven: exec-maven-plugin (exec.* properties)
    maven-micronaut: Micronaut Maven plugin (mn.* properties, mn:run)
    gradle: run task with an injected init script (run* properties)

Example Usage:
    >>> launcher = create_launcher(config, supervisor=supervisor).configure()
    >>> exit_code = launcher.execute()
"""

from __future__ import annotations

from launchwrap.core.backends.base import Launcher, resolve_java_home
from launchwrap.core.backends.gradle import GradleLauncher
from launchwrap.core.backends.maven import MavenLauncher
from launchwrap.core.backends.micronaut import MicronautMavenLauncher
from launchwrap.core.backends.plain import PlainLauncher
from launchwrap.core.config.models import LaunchConfiguration, LauncherSettings
from launchwrap.core.process.supervisor import ProcessSupervisor
from launchwrap.utils.logging import LaunchLogger


def select_launcher_class(settings: LauncherSettings) -> type[Launcher]:
    """
    Pick the backend from the project type and container discriminators.

    Unknown or missing project types fall back to a plain JVM launch.
    """
    project_type = (settings.project_type or "").lower()
    container = (settings.container or "").lower()
    if project_type == "gradle":
        return GradleLauncher
    if project_type == "maven":
        if container == "micronaut":
            return MicronautMavenLauncher
        return MavenLauncher
    return PlainLauncher


def create_launcher(
    config: LaunchConfiguration,
    *,
    supervisor: ProcessSupervisor | None = None,
    events: LaunchLogger | None = None,
) -> Launcher:
    """Instantiate the backend launcher for a configuration."""
    cls = select_launcher_class(config.settings)
    return cls(config, supervisor=supervisor, events=events)


__all__ = [
    "GradleLauncher",
    "Launcher",
    "MavenLauncher",
    "MicronautMavenLauncher",
    "PlainLauncher",
    "create_launcher",
    "resolve_java_home",
    "select_launcher_class",
]
