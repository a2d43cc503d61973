"""
Pytest configuration and shared fixtures.

Provides launch configurations, fake build-tool installations and project
directory layouts used across the test suite.
"""

import os
import stat
import subprocess
import sys
import time
from pathlib import Path
from typing import Any, Callable, Iterator

import psutil
import pytest

from launchwrap.core.config.models import DebugSettings, LaunchConfiguration, LauncherSettings

JAVA = "/opt/jdk/bin/java"

posix_only = pytest.mark.skipif(sys.platform == "win32", reason="POSIX executable lookup")


def make_executable(path: Path) -> Path:
    """Create an executable shell script at *path*."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("#!/bin/sh\nexit 0\n")
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A single-module project directory."""
    project = tmp_path / "project"
    project.mkdir()
    return project


@pytest.fixture
def multi_module(tmp_path: Path) -> tuple[Path, Path]:
    """
    A multi-module layout.

    Returns:
        (root, module) where module is root/services/app
    """
    root = tmp_path / "root"
    module = root / "services" / "app"
    module.mkdir(parents=True)
    return root, module


@pytest.fixture
def empty_path(tmp_path: Path) -> dict[str, str]:
    """An environment whose PATH contains no build tools."""
    bin_dir = tmp_path / "empty-bin"
    bin_dir.mkdir()
    return {"PATH": str(bin_dir)}


# ==============================================================================
# Configuration Fixtures
# ==============================================================================


@pytest.fixture
def make_config() -> Callable[..., LaunchConfiguration]:
    """
    Factory for launch configurations.

    Keyword arguments override LaunchConfiguration fields; ``settings`` may
    be given as a dict of LauncherSettings fields.
    """

    def _make(**overrides: Any) -> LaunchConfiguration:
        settings = overrides.pop("settings", {})
        if isinstance(settings, dict):
            settings = LauncherSettings(**settings)
        debug = overrides.pop("debug", None)
        if isinstance(debug, dict):
            debug = DebugSettings(**debug)
        values: dict[str, Any] = {"jvm_binary_path": JAVA, "settings": settings}
        if debug is not None:
            values["debug"] = debug
        values.setdefault("environment", {"PATH": os.defpath})
        values.update(overrides)
        return LaunchConfiguration(**values)

    return _make


@pytest.fixture
def client_debug() -> DebugSettings:
    """Debug settings for an IDE listening on 5005 (JVM attaches)."""
    return DebugSettings(
        enabled=True,
        jdwp_raw="-agentlib:jdwp=transport=dt_socket,server=n,suspend=y,address=localhost:5005",
        host="localhost",
        port=5005,
        server=False,
        suspend=True,
    )


@pytest.fixture
def server_debug() -> DebugSettings:
    """Debug settings for a JVM listening on 8000."""
    return DebugSettings(
        enabled=True,
        jdwp_raw="-agentlib:jdwp=transport=dt_socket,server=y,suspend=n,address=8000",
        port=8000,
        server=True,
        suspend=False,
    )


# ==============================================================================
# Real Process Fixtures
# ==============================================================================

_SLEEP = "import time; time.sleep(60)"


def _spawner(child_code: str) -> str:
    """Python source that starts *child_code* in a subprocess and then sleeps."""
    return (
        "import subprocess, sys, time; "
        f"subprocess.Popen([sys.executable, '-c', {child_code!r}]); "
        "time.sleep(60)"
    )


@pytest.fixture
def sleeping_tree() -> Iterator[tuple[subprocess.Popen, list[psutil.Process]]]:
    """
    A real three-level process tree: root, child and grandchild all sleep.

    Yields:
        (root Popen, [child, grandchild] as psutil processes)
    """
    root = subprocess.Popen([sys.executable, "-c", _spawner(_spawner(_SLEEP))])
    tree: list[psutil.Process] = []
    try:
        deadline = time.monotonic() + 30
        while len(tree) < 2:
            if time.monotonic() > deadline:
                pytest.fail("process tree did not start in time")
            time.sleep(0.05)
            tree = psutil.Process(root.pid).children(recursive=True)
        yield root, tree
    finally:
        for proc in tree:
            try:
                proc.kill()
            except psutil.NoSuchProcess:
                pass
        if root.poll() is None:
            root.kill()
        root.wait()
