"""
Gradle launcher.

Runs the ``run`` task with an injected init script (``launcher.groovy`` from
the JDT_LAUNCHWRAP_PROJECT_SCRIPTS directory) that reads the run* project
properties and configures the application's JavaExec task:

    gradlew -Dorg.gradle.java.home=<home> -I <scripts>/launcher.groovy
            -PrunJvmArgs=... -PrunArgs=... -PrunClassName=... -x check run

Cancellation is cooperative: Gradle is asked to terminate, which cancels the
running build, before anything is killed.
"""

from __future__ import annotations

from pathlib import Path

from launchwrap.core.backends.base import Launcher
from launchwrap.core.backends.executables import resolve_build_tool
from launchwrap.core.config import env as envvars
from launchwrap.core.errors import MissingScriptDirectoryError
from launchwrap.core.launch.cmdline import CommandLine, ProcessSpec, QuotedParts
from launchwrap.core.process.supervisor import CancellationToken

INIT_SCRIPT = "launcher.groovy"


class GradleLauncher(Launcher):
    """
    Launches through Gradle's run task.

    Attributes:
        launch_task: Task executed by the run step
    """

    name = "gradle"
    launch_task = "run"

    def configure(self) -> GradleLauncher:
        """
        Raises:
            MissingScriptDirectoryError: JDT_LAUNCHWRAP_PROJECT_SCRIPTS is unset
        """
        self.init_script()
        return self

    def init_script(self) -> Path:
        scripts_dir = self.config.settings.scripts_dir
        if scripts_dir is None:
            raise MissingScriptDirectoryError(envvars.PROJECT_SCRIPTS)
        return (scripts_dir / INIT_SCRIPT).absolute()

    def gradle_executable(self) -> Path:
        """gradlew from the project or root directory, else GRADLE_HOME or PATH."""
        return resolve_build_tool(
            wrapper="gradlew",
            tool="gradle",
            home_variable="GRADLE_HOME",
            directories=[self.config.project_directory, self.config.root_directory],
            environment=self.config.environment,
        )

    def gradle_arguments(self) -> CommandLine:
        """run* project properties describing the JVM launch."""
        config = self.config
        cmd = CommandLine()

        # Gradle builds the classpath itself, so only the filtered VM args go
        # through. The debug agent is passed as a literal JVM argument.
        jvm_parts = QuotedParts().extend(config.vm_args)
        if config.debug.enabled and config.debug.jdwp_raw:
            jvm_parts = jvm_parts.add(config.debug.jdwp_raw)
        cmd = cmd.add_parts("-PrunJvmArgs=", jvm_parts)
        cmd = cmd.add_parts("-PrunArgs=", QuotedParts().extend(config.program_args))

        if config.main_class is not None:
            cmd = cmd.add("-PrunClassName=" + config.main_class)
        if config.cwd is not None:
            cmd = cmd.add(f"-PrunWorkingDir={config.cwd}")
        if config.settings.continuous:
            cmd = cmd.add("--continuous")
        return cmd

    def build_command(self) -> ProcessSpec:
        cmd = (
            CommandLine((str(self.gradle_executable()),))
            .add(f"-Dorg.gradle.java.home={self.java_home()}")
            .add("-I", str(self.init_script()))
            .add(*self.gradle_arguments().args)
            .add("-x", "check", self.launch_task)
        )
        return ProcessSpec(
            argv=cmd.args,
            cwd=self.config.project_directory,
            env=self.child_environment(),
        )

    def execute(self) -> int:
        process = self.start(self.build_command())
        return self.wait_cooperative(process, CancellationToken())


__all__ = ["GradleLauncher", "INIT_SCRIPT"]
