"""CLI context and dependency container."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from kontemplate.cli.shared.console import CLIConsole, console
from kontemplate.core.models import freeze
from kontemplate.deployment.shell_commands import CommandRunner
from kontemplate.runtime.config import parse_variable_overrides


@dataclass(frozen=True)
class CLIContext:
    """Options and dependencies of one CLI invocation.

    Built once from the command-line flags and passed explicitly to the
    loader, renderer and dispatcher.
    """

    console: CLIConsole
    runner: CommandRunner
    includes: tuple[str, ...] = ()
    excludes: tuple[str, ...] = ()
    variables: Mapping[str, Any] = field(default_factory=freeze)
    kubectl_bin: str = "kubectl"
    helm_bin: str = "helm"


def build_cli_context(
    *,
    includes: Iterable[str] | None = None,
    excludes: Iterable[str] | None = None,
    variables: Iterable[str] | None = None,
    kubectl_bin: str = "kubectl",
    helm_bin: str = "helm",
) -> CLIContext:
    """Build a CLIContext from raw flag values.

    Raises:
        ConfigError: If a ``--var`` value is not a key=value assignment
    """
    return CLIContext(
        console=console,
        runner=CommandRunner(),
        includes=tuple(includes or ()),
        excludes=tuple(excludes or ()),
        variables=freeze(parse_variable_overrides(variables)),
        kubectl_bin=kubectl_bin,
        helm_bin=helm_bin,
    )
