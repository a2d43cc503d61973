"""
Command-line values shared by the backend launchers.

Every launch step composes a fresh, immutable CommandLine; arguments that
the build tool later hands to a shell (exec.args, mn.jvmArgs, runJvmArgs...)
are grouped with QuotedParts and emitted as a single ``<prefix><parts>``
argument.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path


def quote(value: str) -> str:
    """
    Quote one value for a build-tool argument string.

    Values containing a space or a double quote are wrapped in double quotes
    with backslashes and quotes escaped. Other values stay bare with only
    quote characters escaped. Downstream parsers depend on this asymmetry.

    Examples:
        >>> quote("a b")
        '"a b"'
        >>> quote("it's")
        "it\\\\'s"
        >>> quote("plain")
        'plain'
    """
    if " " in value or '"' in value:
        return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'
    return value.replace('"', '\\"').replace("'", "\\'")


@dataclass(frozen=True)
class QuotedParts:
    """An ordered group of quoted values, joined with spaces when emitted."""

    parts: tuple[str, ...] = ()

    def add(self, *values: str) -> QuotedParts:
        return QuotedParts(self.parts + tuple(quote(v) for v in values))

    def extend(self, values: Iterable[str]) -> QuotedParts:
        return self.add(*values)

    def joined(self) -> str | None:
        """Space-joined parts, or None when the group is empty."""
        if not self.parts:
            return None
        return " ".join(self.parts)

    def __bool__(self) -> bool:
        return bool(self.parts)


@dataclass(frozen=True)
class CommandLine:
    """Immutable argv under construction."""

    args: tuple[str, ...] = ()

    def add(self, *args: str) -> CommandLine:
        return CommandLine(self.args + args)

    def prepend(self, *args: str) -> CommandLine:
        return CommandLine(args + self.args)

    def add_parts(self, prefix: str, parts: QuotedParts) -> CommandLine:
        """Append ``prefix + parts`` unless the group is empty."""
        joined = parts.joined()
        if joined is None:
            return self
        return self.add(prefix + joined)

    def to_list(self) -> list[str]:
        return list(self.args)


@dataclass(frozen=True)
class ProcessSpec:
    """
    Everything needed to start one process.

    Attributes:
        argv: Command line, executable first
        cwd: Working directory
        env: Complete child environment
    """

    argv: tuple[str, ...]
    cwd: Path | None = None
    env: dict[str, str] = field(default_factory=dict)

    @property
    def executable(self) -> str:
        return self.argv[0]

    def command(self) -> list[str]:
        return list(self.argv)


__all__ = ["CommandLine", "ProcessSpec", "QuotedParts", "quote"]
