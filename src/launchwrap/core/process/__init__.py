"""
Process-tree supervision.

Modules:
    tree: Snapshot and terminate a process with all its descendants
    supervisor: Cancellation callbacks (signals, IDE cancel) and tokens
    watchdog: Out-of-process companion for platforms that orphan children
        (imported directly, since it also runs as ``python -m``)
"""

from launchwrap.core.process.supervisor import CancellationToken, ProcessSupervisor
from launchwrap.core.process.tree import descendants, destroy, is_alive, kill_tree

__all__ = [
    "CancellationToken",
    "ProcessSupervisor",
    "descendants",
    "destroy",
    "is_alive",
    "kill_tree",
]
