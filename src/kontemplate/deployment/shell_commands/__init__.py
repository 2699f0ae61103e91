"""Shell command abstractions for kubectl/helm dispatch.

- runner: subprocess-backed process execution
- helm: helm commands run outside of resource set dispatch
- types: result type and the process boundary protocols

Usage:
    from kontemplate.deployment.shell_commands import CommandRunner

    runner = CommandRunner()
    process = runner.start(["kubectl", "apply", "-f", "-"])
"""

from .helm import HelmCommands
from .runner import CommandRunner, PipedProcess
from .types import CommandResult, ProcessRunner, RunningProcess

__all__ = [
    "CommandResult",
    "CommandRunner",
    "HelmCommands",
    "PipedProcess",
    "ProcessRunner",
    "RunningProcess",
]
