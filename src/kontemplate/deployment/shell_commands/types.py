"""Data types for shell command execution.

This module contains the result type returned by blocking commands and the
protocols describing the process boundary, so the dispatcher can be driven
by a fake runner in tests instead of real binaries.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import IO, Protocol

__all__ = [
    "CommandResult",
    "ProcessRunner",
    "RunningProcess",
]


@dataclass
class CommandResult:
    """Result of a command execution."""

    success: bool
    stdout: str = ""
    stderr: str = ""
    returncode: int = 0


class RunningProcess(Protocol):
    """A started child process whose standard input is still open.

    Attributes:
        stdin: Writable text handle bound to the process's standard input
    """

    stdin: IO[str]

    def wait(self) -> int:
        """Block until the process exits and return its exit status."""
        ...


class ProcessRunner(Protocol):
    """Narrow interface for launching external tools."""

    def start(self, cmd: Sequence[str]) -> RunningProcess:
        """Launch ``cmd`` with a writable stdin and inherited stdout/stderr."""
        ...

    def run(self, cmd: Sequence[str], *, capture_output: bool = True) -> CommandResult:
        """Run ``cmd`` to completion."""
        ...
