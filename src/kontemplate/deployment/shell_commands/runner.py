"""Command runner for executing external tools.

This module provides the subprocess-backed process execution used by the
dispatcher and by helm repository registration.
"""

from __future__ import annotations

import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import IO

from .types import CommandResult


class PipedProcess:
    """A running ``subprocess.Popen`` exposed as a ``RunningProcess``."""

    def __init__(self, process: subprocess.Popen[str]) -> None:
        if process.stdin is None:
            raise ValueError("process was started without a stdin pipe")
        self._process = process
        self.stdin: IO[str] = process.stdin

    def wait(self) -> int:
        return self._process.wait()


class CommandRunner:
    """Low-level command executor with consistent result handling.

    Output of started processes is inherited from the parent so that the
    external tool reports directly to the user's terminal.
    """

    def __init__(self, cwd: Path | None = None) -> None:
        """Initialize the command runner.

        Args:
            cwd: Working directory for launched commands.
                 Defaults to the current working directory.
        """
        self.cwd = cwd

    def run(
        self,
        cmd: Sequence[str],
        *,
        capture_output: bool = True,
    ) -> CommandResult:
        """Execute a command and return structured result.

        Args:
            cmd: Command and arguments as a sequence
            capture_output: Whether to capture stdout/stderr

        Returns:
            CommandResult with success status, output, and return code

        Raises:
            OSError: If the executable cannot be launched
        """
        result = subprocess.run(
            list(cmd),
            cwd=self.cwd,
            capture_output=capture_output,
            text=True,
            encoding="utf-8",
            check=False,
        )
        return CommandResult(
            success=result.returncode == 0,
            stdout=result.stdout or "",
            stderr=result.stderr or "",
            returncode=result.returncode,
        )

    def start(self, cmd: Sequence[str]) -> PipedProcess:
        """Launch a command with a writable stdin pipe.

        The caller owns the returned stdin handle and must close it before
        waiting, otherwise the child never sees end of input.

        Args:
            cmd: Command and arguments as a sequence

        Returns:
            The running process

        Raises:
            OSError: If the executable cannot be launched
        """
        process = subprocess.Popen(
            list(cmd),
            cwd=self.cwd,
            stdin=subprocess.PIPE,
            text=True,
            encoding="utf-8",
        )
        return PipedProcess(process)
