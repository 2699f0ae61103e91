"""Test doubles and builders shared across the test suite."""

from __future__ import annotations

import io
from collections.abc import Sequence
from pathlib import Path
from typing import Any

import yaml

from kontemplate.deployment.shell_commands.types import CommandResult


class FakeStdin(io.StringIO):
    """StringIO that remembers its contents after being closed."""

    def __init__(self, fail_write: bool = False) -> None:
        super().__init__()
        self.fail_write = fail_write
        self.contents = ""

    def write(self, s: str) -> int:
        if self.fail_write:
            raise BrokenPipeError(32, "Broken pipe")
        return super().write(s)

    def close(self) -> None:
        if not self.closed:
            self.contents = self.getvalue()
        super().close()


class FakeProcess:
    """A started process that exits with a preset status."""

    def __init__(self, cmd: list[str], returncode: int = 0, fail_write: bool = False) -> None:
        self.cmd = cmd
        self.returncode = returncode
        self.stdin = FakeStdin(fail_write)
        self.waited = False

    def wait(self) -> int:
        self.waited = True
        return self.returncode


class FakeProcessRunner:
    """ProcessRunner that records invocations instead of spawning binaries.

    Args:
        fail_on_call: 1-based index of the start() call that exits with status 1
        start_error: Exception raised by start()
        fail_write: Make every stdin write raise BrokenPipeError
        run_returncode: Exit status returned by run()
    """

    def __init__(
        self,
        *,
        fail_on_call: int | None = None,
        start_error: OSError | None = None,
        fail_write: bool = False,
        run_returncode: int = 0,
    ) -> None:
        self.fail_on_call = fail_on_call
        self.start_error = start_error
        self.fail_write = fail_write
        self.run_returncode = run_returncode
        self.processes: list[FakeProcess] = []
        self.ran: list[list[str]] = []

    @property
    def started(self) -> list[list[str]]:
        return [process.cmd for process in self.processes]

    def start(self, cmd: Sequence[str]) -> FakeProcess:
        if self.start_error is not None:
            raise self.start_error
        call_number = len(self.processes) + 1
        returncode = 1 if call_number == self.fail_on_call else 0
        process = FakeProcess(list(cmd), returncode=returncode, fail_write=self.fail_write)
        self.processes.append(process)
        return process

    def run(self, cmd: Sequence[str], *, capture_output: bool = True) -> CommandResult:
        self.ran.append(list(cmd))
        return CommandResult(
            success=self.run_returncode == 0,
            returncode=self.run_returncode,
        )


def write_cluster_config(directory: Path, data: dict[str, Any], name: str = "cluster.yaml") -> Path:
    """Write a cluster configuration file and return its path."""
    config_path = directory / name
    config_path.write_text(yaml.safe_dump(data, sort_keys=False))
    return config_path


def write_templates(directory: Path, templates: dict[str, str]) -> Path:
    """Create a resource set directory holding the given template files."""
    directory.mkdir(parents=True, exist_ok=True)
    for filename, content in templates.items():
        (directory / filename).write_text(content)
    return directory
