"""Helm command abstractions.

This module provides the helm commands run outside of resource set
dispatch, currently chart repository registration.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .types import CommandResult

if TYPE_CHECKING:
    from .types import ProcessRunner


class HelmCommands:
    """Helm-related shell commands."""

    def __init__(self, runner: ProcessRunner, binary: str = "helm") -> None:
        """Initialize Helm commands.

        Args:
            runner: Command runner for executing shell commands
            binary: Path to the helm executable
        """
        self._runner = runner
        self.binary = binary

    def repo_add(self, name: str, url: str) -> CommandResult:
        """Register a chart repository.

        Output is not captured so helm's own messages reach the terminal.

        Args:
            name: Local alias for the repository
            url: Repository URL

        Returns:
            CommandResult with registration status

        Raises:
            OSError: If the helm binary cannot be launched
        """
        cmd = [self.binary, "repo", "add", name, url]
        return self._runner.run(cmd, capture_output=False)
