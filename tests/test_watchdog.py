"""Tests for the out-of-process tree watchdog."""

import sys
from unittest.mock import MagicMock, patch

import psutil
import pytest

from launchwrap.core.config import env as envvars
from launchwrap.core.config.models import LauncherSettings
from launchwrap.core.process.watchdog import (
    GRACE_PERIOD,
    WATCHDOG_MODULE,
    Watchdog,
    needs_watchdog,
    spawn_watchdog,
)


def fake_process(pid: int, *, alive: bool = True):
    proc = MagicMock(spec=psutil.Process)
    proc.pid = pid
    proc.is_running.return_value = alive
    proc.status.return_value = psutil.STATUS_RUNNING
    proc.children.return_value = []
    return proc


class TestNeedsWatchdog:
    """Platform selection."""

    @pytest.mark.parametrize(
        "platform,expected",
        [("win32", True), ("linux", False), ("darwin", False)],
    )
    def test_platforms(self, platform: str, expected: bool) -> None:
        assert needs_watchdog(platform) is expected


class TestWatchdogRun:
    """Watch loop."""

    def test_exits_when_snapshot_finishes(self) -> None:
        parent = fake_process(1)
        child = fake_process(2)
        sleep = MagicMock()
        watchdog = Watchdog(parent, [child], sleep=sleep)

        with patch(
            "launchwrap.core.process.watchdog.psutil.wait_procs",
            return_value=([child], []),
        ):
            assert watchdog.run() == 0

        sleep.assert_not_called()
        child.kill.assert_not_called()

    def test_kills_survivors_when_parent_dies(self) -> None:
        parent = fake_process(1, alive=False)
        child = fake_process(2)
        grandchild = fake_process(3)
        child.children.return_value = [grandchild]
        sleep = MagicMock()
        watchdog = Watchdog(parent, [child], sleep=sleep)

        with patch(
            "launchwrap.core.process.watchdog.psutil.wait_procs",
            return_value=([], [child]),
        ):
            assert watchdog.run() == 0

        sleep.assert_called_once_with(GRACE_PERIOD)
        child.kill.assert_called_once_with()
        grandchild.kill.assert_called_once_with()

    def test_keeps_waiting_while_parent_alive(self) -> None:
        parent = fake_process(1)
        child = fake_process(2)
        watchdog = Watchdog(parent, [child], sleep=MagicMock())

        with patch(
            "launchwrap.core.process.watchdog.psutil.wait_procs",
            side_effect=[([], [child]), ([], [child]), ([child], [])],
        ) as mock_wait:
            watchdog.run()

        assert mock_wait.call_count == 3
        child.kill.assert_not_called()


class TestForCurrentProcess:
    """Snapshot of the parent's descendants."""

    def test_excludes_self(self) -> None:
        current = fake_process(10)
        parent = fake_process(1)
        sibling = fake_process(11)
        parent.children.return_value = [sibling, current]
        current.parent.return_value = parent

        with patch("launchwrap.core.process.watchdog.psutil.Process", return_value=current):
            watchdog = Watchdog.for_current_process()

        assert watchdog.parent is parent
        assert watchdog.snapshot == [sibling]

    def test_nothing_to_watch(self) -> None:
        current = fake_process(10)
        parent = fake_process(1)
        parent.children.return_value = [current]
        current.parent.return_value = parent

        with patch("launchwrap.core.process.watchdog.psutil.Process", return_value=current):
            with pytest.raises(RuntimeError):
                Watchdog.for_current_process()

    def test_orphaned(self) -> None:
        current = fake_process(10)
        current.parent.return_value = None

        with patch("launchwrap.core.process.watchdog.psutil.Process", return_value=current):
            with pytest.raises(RuntimeError):
                Watchdog.for_current_process()


class TestSpawnWatchdog:
    """Starting the companion process."""

    def test_spawn(self, tmp_path) -> None:
        settings = LauncherSettings(log_file=tmp_path / "events.jsonl")

        with patch("launchwrap.core.process.watchdog.subprocess.Popen") as mock_popen:
            assert spawn_watchdog(settings) is mock_popen.return_value

        argv = mock_popen.call_args.args[0]
        assert argv == [sys.executable, "-m", WATCHDOG_MODULE]
        assert mock_popen.call_args.kwargs["env"][envvars.LOG_FILE] == str(tmp_path / "events.jsonl")

    def test_spawn_failure_is_not_fatal(self) -> None:
        with patch(
            "launchwrap.core.process.watchdog.subprocess.Popen",
            side_effect=OSError("denied"),
        ):
            assert spawn_watchdog() is None
