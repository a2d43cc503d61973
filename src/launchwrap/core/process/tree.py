"""
Process-tree termination.

Terminating a build tool does not reliably terminate what it started: the
JVM forked by ``mvn exec:exec`` or ``gradle run`` survives its parent on
most platforms. kill_tree() snapshots the live descendants first and then
terminates the whole tree.

All failures here happen during best-effort cleanup, so they are logged and
never raised.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Union

import psutil

from launchwrap.utils.logging import EventType, LaunchLogger

logger = logging.getLogger(__name__)

ProcessLike = Union["subprocess.Popen[bytes]", psutil.Process, int]


def as_process(process: ProcessLike) -> psutil.Process | None:
    """
    Resolve a Popen, psutil.Process or pid to a psutil.Process.

    Returns:
        The process, or None if it no longer exists
    """
    if isinstance(process, int):
        pid = process
    elif isinstance(process, subprocess.Popen):
        # A reaped Popen's pid may already belong to an unrelated process
        if process.poll() is not None:
            return None
        pid = process.pid
    else:
        return process
    try:
        return psutil.Process(pid)
    except psutil.NoSuchProcess:
        return None


def is_alive(process: psutil.Process) -> bool:
    """Whether the process is running (zombies count as exited)."""
    try:
        return process.is_running() and process.status() != psutil.STATUS_ZOMBIE
    except psutil.Error:
        return False


def descendants(process: psutil.Process) -> list[psutil.Process]:
    """All live descendants of a process, or [] if it already exited."""
    try:
        return [p for p in process.children(recursive=True) if is_alive(p)]
    except psutil.Error:
        return []


def destroy(
    process: psutil.Process,
    *,
    force: bool = False,
    events: LaunchLogger | None = None,
) -> bool:
    """
    Terminate one process if it is still alive.

    Args:
        process: Process to terminate
        force: Kill instead of requesting termination
        events: Diagnostic event sink

    Returns:
        True if a termination request was delivered
    """
    if not is_alive(process):
        return False
    events = events or LaunchLogger.disabled()
    try:
        logger.debug("Destroying process %d", process.pid)
        if force:
            process.kill()
        else:
            process.terminate()
    except (psutil.NoSuchProcess, psutil.AccessDenied) as e:
        logger.info("Could not destroy process %d: %s", process.pid, e)
        events.log_event(EventType.DESTROY_FAILED, {"pid": process.pid, "error": str(e)})
        return False
    events.log_event(EventType.DESTROY, {"pid": process.pid, "force": force})
    return True


def kill_tree(
    process: ProcessLike,
    *,
    force: bool = False,
    events: LaunchLogger | None = None,
) -> list[int]:
    """
    Terminate a process and every live descendant.

    Descendants are collected before the root is terminated, because an
    orphaned child is re-parented and can no longer be found through it.

    Args:
        process: Root of the tree (Popen, psutil.Process or pid)
        force: Kill instead of requesting termination
        events: Diagnostic event sink

    Returns:
        Pids that received a termination request
    """
    events = events or LaunchLogger.disabled()
    root = as_process(process)
    if root is None:
        logger.debug("Process tree already gone")
        return []

    children = descendants(root)
    events.log_event(
        EventType.KILL_TREE,
        {"pid": root.pid, "descendants": [c.pid for c in children]},
    )

    destroyed: list[int] = []
    for proc in [root, *children]:
        if destroy(proc, force=force, events=events):
            destroyed.append(proc.pid)
    return destroyed


__all__ = [
    "ProcessLike",
    "as_process",
    "descendants",
    "destroy",
    "is_alive",
    "kill_tree",
]
