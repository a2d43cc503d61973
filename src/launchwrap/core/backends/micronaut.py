"""
Maven launcher for Micronaut applications (``mn:run``).

mn:run has its own properties instead of exec.*. Its debug support only
covers server-mode attach (the JVM listening), so a client-mode request
from the IDE is forwarded by re-injecting the original JDWP flag into
mn.jvmArgs.
"""

from __future__ import annotations

from launchwrap.core.backends.maven import MavenLauncher
from launchwrap.core.launch.cmdline import CommandLine, QuotedParts

MICRONAUT_RUN_GOAL = "mn:run"


class MicronautMavenLauncher(MavenLauncher):
    """Launches through the Micronaut Maven plugin."""

    name = "maven-micronaut"
    default_goal = MICRONAUT_RUN_GOAL

    def maven_arguments(self) -> CommandLine:
        config = self.config
        debug = config.debug
        cmd = CommandLine()

        if config.main_class is not None:
            cmd = cmd.add("-Dmn.mainClass=" + config.main_class)
        # mn:run has no working directory property
        cmd = cmd.add_parts("-Dmn.appArgs=", QuotedParts().extend(config.program_args))
        if not config.settings.continuous:
            cmd = cmd.add("-Dmn.watch=false")

        parts = QuotedParts().extend(config.all_vm_args_without_debug)
        if config.uses_modules:
            parts = parts.add("--module-path", "%modulepath")
            if config.main_class is not None:
                parts = parts.add("--module")
        if debug.enabled and not debug.server and debug.jdwp_raw:
            parts = parts.add(debug.jdwp_raw)
        cmd = cmd.add_parts("-Dmn.jvmArgs=", parts)

        if debug.enabled and debug.server:
            cmd = cmd.add("-Dmn.debug=true")
            if debug.host is not None:
                cmd = cmd.add("-Dmn.debug.host=" + debug.host)
            cmd = cmd.add(
                f"-Dmn.debug.port={debug.port}",
                f"-Dmn.debug.suspend={str(debug.suspend).lower()}",
            )
        return cmd


__all__ = ["MICRONAUT_RUN_GOAL", "MicronautMavenLauncher"]
