"""
Maven launcher using the exec-maven-plugin.

The JVM launch is expressed through exec.* properties:

    mvnw -Dexec.executable=<jvm> -Dexec.args=<vm args, paths, main, args>
         -Dexec.mainClass=<main> [-Dexec.workingdir=<cwd>] <exec goal>

For a module of a multi-module build, the module and everything it depends
on are installed from the root first (``--also-make --projects <module>``).
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from launchwrap.core.backends.base import Launcher
from launchwrap.core.backends.executables import resolve_build_tool
from launchwrap.core.config import env as envvars
from launchwrap.core.config.models import LaunchConfiguration
from launchwrap.core.launch.cmdline import CommandLine, ProcessSpec, QuotedParts
from launchwrap.core.process.supervisor import ProcessSupervisor
from launchwrap.core.process.watchdog import needs_watchdog, spawn_watchdog
from launchwrap.utils.logging import EventType, LaunchLogger

logger = logging.getLogger(__name__)

DEFAULT_EXEC_GOAL = "org.codehaus.mojo:exec-maven-plugin:3.1.0:exec"


class MavenLauncher(Launcher):
    """
    Launches through Maven's exec goal.

    Attributes:
        goal: Goal invoked by the run step, set by configure()
    """

    name = "maven"
    default_goal = DEFAULT_EXEC_GOAL

    def __init__(
        self,
        config: LaunchConfiguration,
        *,
        supervisor: ProcessSupervisor | None = None,
        events: LaunchLogger | None = None,
    ) -> None:
        super().__init__(config, supervisor=supervisor, events=events)
        self.goal = self.default_goal

    def configure(self) -> MavenLauncher:
        """Pick the run goal: environment, then -D property, then default."""
        override = self.config.settings.run_goal or self.config.system_properties.get(envvars.RUN_GOAL)
        if override:
            self.goal = override
        return self

    # -- command composition -------------------------------------------------

    def maven_executable(self) -> Path:
        """mvnw from the project or root directory, else MAVEN_HOME or PATH."""
        return resolve_build_tool(
            wrapper="mvnw",
            tool="mvn",
            home_variable="MAVEN_HOME",
            directories=[self.config.project_directory, self.config.root_directory],
            environment=self.config.environment,
        )

    def vm_parts(self) -> QuotedParts:
        """JVM part of exec.args: VM args, class/module path, debug agent."""
        config = self.config
        parts = QuotedParts().extend(config.all_vm_args_without_debug)
        parts = parts.add("--class-path", "%classpath")
        if config.debug.enabled and config.debug.jdwp_raw:
            parts = parts.add(config.debug.jdwp_raw)
        if config.uses_modules:
            parts = parts.add("--module-path", "%modulepath")
            if config.main_class is not None:
                parts = parts.add("--module")
        return parts

    def maven_arguments(self) -> CommandLine:
        """Backend properties describing the JVM launch."""
        config = self.config
        cmd = CommandLine().add("-Dexec.executable=" + config.jvm_binary_path)

        parts = self.vm_parts().add("${exec.mainClass}").extend(config.program_args)
        cmd = cmd.add_parts("-Dexec.args=", parts)

        if config.main_class is not None:
            cmd = cmd.add("-Dexec.mainClass=" + config.main_class)
        if config.cwd is not None:
            cmd = cmd.add(f"-Dexec.workingdir={config.cwd}")
        return cmd

    def project_property_arguments(self) -> CommandLine:
        """``-D<key>=<value>`` for every -Dmaven.* property of the launch line."""
        return CommandLine(
            tuple(f"-D{k}={v}" for k, v in self.config.project_properties.items())
        )

    def build_command(self) -> ProcessSpec:
        cmd = (
            CommandLine((str(self.maven_executable()),))
            .add(*self.maven_arguments().args)
            .add(*self.project_property_arguments().args)
            .add(self.goal)
        )
        return ProcessSpec(
            argv=cmd.args,
            cwd=self.config.project_directory,
            env=self.child_environment(),
        )

    def build_install_command(self) -> ProcessSpec | None:
        """
        Compose the dependency install pre-step.

        Returns:
            The pre-step, or None for single-module projects (the run step
            compiles the reactor itself) and when the pre-step is disabled
        """
        config = self.config
        root = config.root_directory
        if root is None or config.project_directory is None or not config.is_sub_project:
            return None
        if not config.settings.install_dependencies:
            return None

        module = os.path.relpath(config.project_directory.absolute(), root.absolute())
        cmd = CommandLine((str(self.maven_executable()),)).add(
            "-DskipTests", "--also-make", "--projects", module, "install"
        )
        return ProcessSpec(argv=cmd.args, cwd=root, env=self.child_environment())

    # -- execution -----------------------------------------------------------

    def execute(self) -> int:
        install = self.build_install_command()
        if install is not None:
            logger.info("Compiling before execution")
            self.events.log_event(EventType.PRE_STEP, {"argv": install.command()})
            exit_code = self.wait_destructive(self.start(install, step="install"))
            if exit_code != 0:
                return exit_code

        process = self.start(self.build_command())
        if needs_watchdog():
            spawn_watchdog(self.config.settings)
        return self.wait_destructive(process)


__all__ = ["DEFAULT_EXEC_GOAL", "MavenLauncher"]
