"""Tests for process-tree termination helpers."""

import subprocess
from unittest.mock import MagicMock, patch

import psutil
import pytest

from launchwrap.core.process.tree import as_process, descendants, destroy, is_alive, kill_tree


def fake_process(pid: int, *, children: list | None = None, status: str = psutil.STATUS_RUNNING):
    proc = MagicMock(spec=psutil.Process)
    proc.pid = pid
    proc.is_running.return_value = True
    proc.status.return_value = status
    proc.children.return_value = children or []
    return proc


class TestAsProcess:
    """Resolution of Popen / psutil.Process / pid."""

    def test_psutil_process_passthrough(self) -> None:
        proc = fake_process(1)
        assert as_process(proc) is proc

    def test_pid(self) -> None:
        with patch("launchwrap.core.process.tree.psutil.Process") as mock_process:
            assert as_process(123) is mock_process.return_value
        mock_process.assert_called_once_with(123)

    def test_reaped_popen(self) -> None:
        popen = MagicMock(spec=subprocess.Popen)
        popen.poll.return_value = 0
        assert as_process(popen) is None

    def test_running_popen(self) -> None:
        popen = MagicMock(spec=subprocess.Popen)
        popen.poll.return_value = None
        popen.pid = 55
        with patch("launchwrap.core.process.tree.psutil.Process") as mock_process:
            as_process(popen)
        mock_process.assert_called_once_with(55)

    def test_vanished_pid(self) -> None:
        with patch(
            "launchwrap.core.process.tree.psutil.Process",
            side_effect=psutil.NoSuchProcess(999),
        ):
            assert as_process(999) is None


class TestIsAlive:
    """Liveness checks."""

    def test_running(self) -> None:
        assert is_alive(fake_process(1)) is True

    def test_zombie_counts_as_dead(self) -> None:
        assert is_alive(fake_process(1, status=psutil.STATUS_ZOMBIE)) is False

    def test_vanished(self) -> None:
        proc = fake_process(1)
        proc.status.side_effect = psutil.NoSuchProcess(1)
        assert is_alive(proc) is False


class TestDestroy:
    """Single-process termination."""

    def test_terminate(self) -> None:
        proc = fake_process(1)
        assert destroy(proc) is True
        proc.terminate.assert_called_once_with()
        proc.kill.assert_not_called()

    def test_force_kill(self) -> None:
        proc = fake_process(1)
        assert destroy(proc, force=True) is True
        proc.kill.assert_called_once_with()

    def test_dead_process_skipped(self) -> None:
        proc = fake_process(1)
        proc.is_running.return_value = False
        assert destroy(proc) is False
        proc.terminate.assert_not_called()

    @pytest.mark.parametrize("error", [psutil.NoSuchProcess(1), psutil.AccessDenied(1)])
    def test_errors_are_not_raised(self, error: Exception) -> None:
        proc = fake_process(1)
        proc.terminate.side_effect = error
        assert destroy(proc) is False


class TestKillTree:
    """Whole-tree termination."""

    def test_root_and_descendants(self) -> None:
        grandchild = fake_process(3)
        child = fake_process(2)
        root = fake_process(1, children=[child, grandchild])

        assert kill_tree(root) == [1, 2, 3]

        root.children.assert_called_once_with(recursive=True)
        for proc in (root, child, grandchild):
            proc.terminate.assert_called_once_with()

    def test_descendants_collected_before_root_terminated(self) -> None:
        child = fake_process(2)
        root = fake_process(1, children=[child])
        order: list[str] = []
        root.children.side_effect = lambda recursive: order.append("children") or [child]
        root.terminate.side_effect = lambda: order.append("terminate")

        kill_tree(root)

        assert order == ["children", "terminate"]

    def test_force(self) -> None:
        child = fake_process(2)
        root = fake_process(1, children=[child])

        kill_tree(root, force=True)

        root.kill.assert_called_once_with()
        child.kill.assert_called_once_with()

    def test_dead_children_skipped(self) -> None:
        zombie = fake_process(2, status=psutil.STATUS_ZOMBIE)
        root = fake_process(1, children=[zombie])

        assert kill_tree(root) == [1]
        zombie.terminate.assert_not_called()

    def test_tree_already_gone(self) -> None:
        popen = MagicMock(spec=subprocess.Popen)
        popen.poll.return_value = 1
        assert kill_tree(popen) == []

    def test_descendants_of_exited_process(self) -> None:
        root = fake_process(1)
        root.children.side_effect = psutil.NoSuchProcess(1)
        assert descendants(root) == []


class TestKillTreeRealProcesses:
    """kill_tree() against a live process tree."""

    def test_whole_tree_terminated(self, sleeping_tree) -> None:
        root, tree = sleeping_tree

        destroyed = kill_tree(root)
        root.wait(timeout=10)
        _, alive = psutil.wait_procs(tree, timeout=10)

        assert set(destroyed) == {root.pid, *(p.pid for p in tree)}
        assert [p.pid for p in alive if is_alive(p)] == []

    def test_reaped_root_is_left_alone(self, sleeping_tree) -> None:
        root, tree = sleeping_tree
        root.kill()
        root.wait(timeout=10)

        assert kill_tree(root) == []
        assert all(is_alive(p) for p in tree)
