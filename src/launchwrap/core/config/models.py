"""
Configuration data models for launchwrap.

LauncherSettings captures the IDE-provided environment variables;
LaunchConfiguration is the canonical, backend-agnostic description of one
JVM launch, populated by the LaunchConfigurationBuilder and then handed
(read-only) to exactly one backend launcher.
"""

import tempfile
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field

from launchwrap.core.config import env as envvars


def default_log_file() -> Path:
    """Diagnostic log location: ``launchwrap.log`` in the system temp dir."""
    return Path(tempfile.gettempdir()) / "launchwrap.log"


class LauncherSettings(BaseModel):
    """
    Launcher options passed by the IDE through JDT_LAUNCHWRAP_* variables.

    Use :meth:`from_environment` to read them from a process environment.
    """
    project_dir: Optional[Path] = Field(
        default=None,
        description="Directory of the project being launched"
    )
    project_root: Optional[Path] = Field(
        default=None,
        description="Root of a multi-module build; defaults to project_dir"
    )
    cwd: Optional[Path] = Field(
        default=None,
        description="Working directory override for the launched program"
    )
    project_type: Optional[str] = Field(
        default=None,
        description="Build system discriminator: 'maven', 'gradle' or unset for a plain launch"
    )
    container: Optional[str] = Field(
        default=None,
        description="Framework discriminator; 'micronaut' selects mn:run for Maven"
    )
    continuous: bool = Field(
        default=False,
        description="Run in continuous/watch mode"
    )
    install_dependencies: bool = Field(
        default=True,
        description="Build and install sibling modules before running a sub-project"
    )
    scripts_dir: Optional[Path] = Field(
        default=None,
        description="Directory holding the Gradle launcher init script"
    )
    run_goal: Optional[str] = Field(
        default=None,
        description="Maven goal override for the run step"
    )
    log_file: Path = Field(
        default_factory=default_log_file,
        description="Append-only diagnostic event log"
    )

    @classmethod
    def from_environment(cls, environment: Mapping[str, str]) -> "LauncherSettings":
        """
        Read launcher settings from environment variables.

        Args:
            environment: Process environment (usually os.environ)

        Returns:
            LauncherSettings with unset variables left at their defaults
        """
        def path(key: str) -> Optional[Path]:
            value = environment.get(key)
            return Path(value) if value else None

        values = {
            "project_dir": path(envvars.PROJECT_DIR),
            "project_root": path(envvars.PROJECT_ROOT),
            "cwd": path(envvars.PROJECT_CWD),
            "project_type": environment.get(envvars.PROJECT_TYPE) or None,
            "container": environment.get(envvars.PROJECT_CONTAINER) or None,
            "continuous": environment.get(envvars.MICRONAUT_CONTINUOUS) is not None,
            "install_dependencies": not envvars.is_disabled(
                environment.get(envvars.MAVEN_DEPENDENCIES)
            ),
            "scripts_dir": path(envvars.PROJECT_SCRIPTS),
            "run_goal": environment.get(envvars.RUN_GOAL) or None,
        }
        log_file = path(envvars.LOG_FILE)
        if log_file is not None:
            values["log_file"] = log_file
        return cls(**values)


class DebugSettings(BaseModel):
    """
    JDWP debugger-attach parameters.

    jdwp_raw keeps the original agent flag verbatim; backends that cannot
    express a client-mode attach re-inject it instead of regenerating one.
    """
    enabled: bool = Field(default=False, description="Whether a JDWP agent was requested")
    jdwp_raw: Optional[str] = Field(default=None, description="Original -agentlib/-Xrunjdwp flag")
    host: Optional[str] = Field(default=None, description="Debugger host; None for port-only addresses")
    port: int = Field(default=0, ge=0, description="Debugger port")
    server: bool = Field(default=False, description="JVM listens (server=y) instead of attaching")
    suspend: bool = Field(default=False, description="Suspend the JVM until a debugger attaches")


class LaunchConfiguration(BaseModel):
    """
    Canonical launch configuration shared by every backend.

    vm_args excludes -D properties and debug flags; all_vm_args holds every
    JVM flag in the order supplied. Both exist because backends differ in
    which set they forward.
    """
    jvm_binary_path: str = Field(..., description="Runtime binary (argv[0] of the JVM line)")
    project_directory: Optional[Path] = Field(default=None)
    project_root_directory: Optional[Path] = Field(default=None)
    cwd: Optional[Path] = Field(default=None)
    classpath: Optional[str] = Field(default=None)
    module_path: Optional[str] = Field(default=None)
    uses_modules: bool = Field(default=False)
    main_class: Optional[str] = Field(default=None)
    vm_args: list[str] = Field(default_factory=list)
    all_vm_args: list[str] = Field(default_factory=list)
    program_args: list[str] = Field(default_factory=list)
    system_properties: dict[str, str] = Field(default_factory=dict)
    project_properties: dict[str, str] = Field(default_factory=dict)
    debug: DebugSettings = Field(default_factory=DebugSettings)
    environment: dict[str, str] = Field(default_factory=dict)
    settings: LauncherSettings = Field(default_factory=LauncherSettings)

    @property
    def root_directory(self) -> Optional[Path]:
        """Project root, falling back to the project directory."""
        if self.project_root_directory is None:
            return self.project_directory
        return self.project_root_directory

    @property
    def is_sub_project(self) -> bool:
        """Whether the project sits below a distinct root directory."""
        root = self.root_directory
        if root is None or self.project_directory is None:
            return False
        return root.resolve() != self.project_directory.resolve()

    @property
    def all_vm_args_without_debug(self) -> list[str]:
        """all_vm_args minus the JDWP flag, for backends that place it themselves."""
        return [a for a in self.all_vm_args if a != self.debug.jdwp_raw]

    def add_vm_arg(self, arg: str) -> None:
        """Record a plain JVM flag in both vm_args and all_vm_args."""
        self.vm_args.append(arg)
        self.all_vm_args.append(arg)

    def child_environment(self) -> dict[str, str]:
        """Environment for spawned processes, without JDT_LAUNCHWRAP_* keys."""
        return envvars.filter_environment(self.environment)
