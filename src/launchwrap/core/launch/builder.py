"""
Launch configuration builder.

Scans a JVM-style launch line left to right and populates a
LaunchConfiguration. Unrecognized flags are never rejected: they are
forwarded to the JVM as opaque VM arguments.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from pathlib import Path

from launchwrap.core.config.models import LaunchConfiguration, LauncherSettings
from launchwrap.core.errors import ArgumentFileError
from launchwrap.core.launch.debug import JDWP_AGENT, JDWP_RUN, parse_debug_spec
from launchwrap.core.launch.tokenizer import tokenize
from launchwrap.utils.logging import EventType, LaunchLogger

logger = logging.getLogger(__name__)

# -D properties with this prefix are passed to the build tool, not the JVM
PROJECT_PROPERTY_PREFIX = "maven."

CLASSPATH_FLAGS = frozenset({"-cp", "-classpath", "--class-path", "--classpath"})
MODULE_PATH_FLAGS = frozenset({"-p", "--module-path"})
MODULE_FLAGS = frozenset({"-m", "--module"})
IGNORED_FLAGS = frozenset({"-Xdebug"})


def read_argument_file(path: Path) -> list[str]:
    """
    Read and tokenize an ``@argfile``.

    Raises:
        ArgumentFileError: The file cannot be read
    """
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ArgumentFileError(path, str(e)) from e
    # Only \r\n, \r and \n end a line
    return tokenize(text.replace("\r\n", "\n").replace("\r", "\n"))


class LaunchConfigurationBuilder:
    """
    Builds a LaunchConfiguration from a JVM launch line.

    Example:
        >>> builder = LaunchConfigurationBuilder(
        ...     "/usr/lib/jvm/bin/java", ["-cp", "app.jar", "com.example.Main", "x"], {}
        ... )
        >>> config = builder.build()
        >>> config.main_class, config.program_args
        ('com.example.Main', ['x'])
    """

    def __init__(
        self,
        jvm_binary_path: str,
        args: Sequence[str],
        environment: Mapping[str, str],
        *,
        events: LaunchLogger | None = None,
    ) -> None:
        """
        Args:
            jvm_binary_path: Runtime binary the IDE meant to start
            args: Launch line after the binary
            environment: Inherited process environment
            events: Diagnostic event sink
        """
        self._args = list(args)
        self._environment = dict(environment)
        self._jvm_binary_path = jvm_binary_path
        self._project_dir: Path | None = None
        self._events = events or LaunchLogger.disabled()

    def set_project_dir(self, project_dir: Path) -> LaunchConfigurationBuilder:
        """Set the project directory, taking priority over the environment."""
        self._project_dir = project_dir
        return self

    def build(self) -> LaunchConfiguration:
        """
        Scan the launch line and resolve project directories.

        Returns:
            The populated configuration

        Raises:
            ArgumentFileError: An @argfile could not be read
            LaunchConfigurationError: Unsupported debug settings
        """
        settings = LauncherSettings.from_environment(self._environment)
        config = LaunchConfiguration(
            jvm_binary_path=self._jvm_binary_path,
            environment=self._environment,
            settings=settings,
        )
        self._scan(config)

        config.project_directory = self._project_dir or settings.project_dir
        config.project_root_directory = settings.project_root
        config.cwd = settings.cwd

        logger.info("Launching project %s", config.project_directory)
        self._events.log_event(
            EventType.PROJECT_RESOLVED,
            {
                "project_dir": str(config.project_directory) if config.project_directory else None,
                "root_dir": str(config.root_directory) if config.root_directory else None,
                "main_class": config.main_class,
            },
        )
        return config

    def _scan(self, config: LaunchConfiguration) -> None:
        args = self._args
        i = 0
        while i < len(args):
            token = args[i]

            if token.startswith("@"):
                args[i + 1:i + 1] = read_argument_file(Path(token[1:]))
            elif not token.startswith("-"):
                config.main_class = token
                config.program_args.extend(args[i + 1:])
                return
            elif token.startswith("-D"):
                self._add_property(config, token)
            elif token.startswith(JDWP_AGENT):
                config.all_vm_args.append(token)
                parse_debug_spec(token, token[len(JDWP_AGENT):], config.debug)
            elif token.startswith(JDWP_RUN):
                config.all_vm_args.append(token)
                parse_debug_spec(token, token[len(JDWP_RUN):], config.debug)
            elif token in CLASSPATH_FLAGS:
                if i + 1 < len(args):
                    i += 1
                    config.classpath = args[i]
            elif token in MODULE_PATH_FLAGS:
                if i + 1 < len(args):
                    i += 1
                    config.module_path = args[i]
            elif token in MODULE_FLAGS:
                config.uses_modules = True
            elif token in IGNORED_FLAGS:
                pass
            else:
                config.add_vm_arg(token)
            i += 1

    @staticmethod
    def _add_property(config: LaunchConfiguration, token: str) -> None:
        config.all_vm_args.append(token)
        key, _, value = token[2:].partition("=")
        if key.startswith(PROJECT_PROPERTY_PREFIX):
            config.project_properties[key[len(PROJECT_PROPERTY_PREFIX):]] = value
        else:
            config.system_properties[key] = value


def build_configuration(
    argv: Sequence[str],
    environment: Mapping[str, str],
    *,
    events: LaunchLogger | None = None,
) -> LaunchConfiguration:
    """
    Build a configuration from a full argv (``argv[0]`` is the JVM binary).

    Args:
        argv: JVM binary followed by the launch line
        environment: Inherited process environment
        events: Diagnostic event sink

    Returns:
        The populated LaunchConfiguration
    """
    if not argv:
        raise ValueError("argv must contain at least the JVM binary path")
    return LaunchConfigurationBuilder(argv[0], argv[1:], environment, events=events).build()


__all__ = [
    "PROJECT_PROPERTY_PREFIX",
    "LaunchConfigurationBuilder",
    "build_configuration",
    "read_argument_file",
]
