"""
Plain JVM launcher.

Starts the JVM directly, without a build tool in between. Cancellation is
cooperative: the JVM is asked to terminate (so its shutdown hooks run) and is
only killed when it does not exit within the grace period.
"""

from __future__ import annotations

from launchwrap.core.backends.base import Launcher
from launchwrap.core.launch.cmdline import CommandLine, ProcessSpec
from launchwrap.core.process.supervisor import CancellationToken


class PlainLauncher(Launcher):
    """Runs ``<jvm> <vm args> [paths] <main class> <program args>``."""

    name = "plain"

    def build_command(self) -> ProcessSpec:
        config = self.config
        cmd = CommandLine((config.jvm_binary_path,)).add(*config.all_vm_args)
        if config.classpath is not None:
            cmd = cmd.add("--class-path", config.classpath)
        if config.module_path is not None:
            cmd = cmd.add("--module-path", config.module_path)
        if config.main_class is not None:
            if config.uses_modules:
                cmd = cmd.add("--module")
            cmd = cmd.add(config.main_class)
        cmd = cmd.add(*config.program_args)

        env = self.child_environment()
        env["JAVA_HOME"] = str(self.java_home())
        return ProcessSpec(
            argv=cmd.args,
            cwd=config.cwd or config.project_directory,
            env=env,
        )

    def execute(self) -> int:
        process = self.start(self.build_command())
        return self.wait_cooperative(process, CancellationToken())


__all__ = ["PlainLauncher"]
