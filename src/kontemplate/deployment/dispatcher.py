"""Cluster dispatch of rendered resource sets.

Walks rendered resource sets in order and pipes each one into kubectl or
helm against the context's cluster. The first failure aborts the walk;
nothing is retried or rolled back.
"""

from __future__ import annotations

import shlex
from collections.abc import Iterable, Sequence

from loguru import logger

from kontemplate.core.errors import ProcessError
from kontemplate.core.models import Context, RenderedResourceSet, ResourceSetKind
from kontemplate.utils.console_like import ConsoleLike, coalesce_console

from .shell_commands.helm import HelmCommands
from .shell_commands.types import ProcessRunner

DOCUMENT_SEPARATOR = "---\n"


def build_kubectl_args(
    context: Context, kubectl_args: Sequence[str], resource_set: RenderedResourceSet
) -> list[str]:
    """kubectl argv (without the binary) for a resource set."""
    return [*kubectl_args, f"--context={context.name}", *resource_set.args]


def build_helm_args(
    context: Context, helm_args: Sequence[str], resource_set: RenderedResourceSet
) -> list[str]:
    """helm argv (without the binary) for a chart resource set."""
    return [
        *helm_args,
        f"--kube-context={context.name}",
        resource_set.name,
        resource_set.chart or "",
        *resource_set.args,
    ]


class Dispatcher:
    """Feeds rendered resource sets to the external tools.

    Attributes:
        runner: Process runner used to launch kubectl/helm
        kubectl_bin: Path to the kubectl executable
        helm_bin: Path to the helm executable
        console: Console for progress and warnings
    """

    def __init__(
        self,
        runner: ProcessRunner,
        *,
        kubectl_bin: str = "kubectl",
        helm_bin: str = "helm",
        console: ConsoleLike | None = None,
    ) -> None:
        self.runner = runner
        self.kubectl_bin = kubectl_bin
        self.helm_bin = helm_bin
        self.console = coalesce_console(console)
        self.helm = HelmCommands(runner, helm_bin)

    def register_helm_repositories(self, context: Context) -> None:
        """Run ``helm repo add`` for every repository of the context.

        Raises:
            ProcessError: On the first repository that cannot be added
        """
        for repo in context.helm_repositories:
            logger.debug(f"Registering helm repository {repo.name} ({repo.url})")
            try:
                result = self.helm.repo_add(repo.name, repo.url)
            except OSError as e:
                raise ProcessError(
                    f"helm error: could not register repository '{repo.name}'",
                    details=str(e),
                ) from e
            if not result.success:
                raise ProcessError(
                    f"helm error: registering repository '{repo.name}' "
                    f"exited with status {result.returncode}",
                    details=shlex.join([self.helm_bin, "repo", "add", repo.name, repo.url]),
                )

    def apply(
        self,
        context: Context,
        kubectl_args: Sequence[str],
        helm_args: Sequence[str] | None,
        rendered_sets: Iterable[RenderedResourceSet],
    ) -> None:
        """Dispatch rendered resource sets sequentially.

        Sets without resources, of either kind, are skipped with a warning. When
        ``helm_args`` is None the operation has no helm counterpart and helm
        sets are skipped with a warning.

        Args:
            context: Context whose name selects the cluster
            kubectl_args: Leading kubectl arguments (e.g. ["apply", "-f", "-"])
            helm_args: Leading helm arguments (e.g. ["upgrade", "-i", "-f", "-"])
            rendered_sets: Rendered sets in dispatch order

        Raises:
            ProcessError: On the first tool that fails to launch, cannot be
                          written to, or exits non-zero
        """
        for resource_set in rendered_sets:
            if resource_set.is_empty:
                self.console.warn(
                    f"Resource set '{resource_set.name}' contains no valid templates"
                )
                continue

            if resource_set.kind is ResourceSetKind.HELM:
                if helm_args is None:
                    self.console.warn(
                        f"Resource set '{resource_set.name}' is a helm chart and is "
                        "not supported by this operation"
                    )
                    continue
                cmd = [self.helm_bin, *build_helm_args(context, helm_args, resource_set)]
                self._dispatch(resource_set, cmd, "helm")
            else:
                cmd = [self.kubectl_bin, *build_kubectl_args(context, kubectl_args, resource_set)]
                self._dispatch(resource_set, cmd, "kubectl")

    def _dispatch(self, resource_set: RenderedResourceSet, cmd: list[str], tool: str) -> None:
        command_line = shlex.join(cmd)
        logger.debug(f"Dispatching resource set '{resource_set.name}': {command_line}")

        try:
            process = self.runner.start(cmd)
        except OSError as e:
            raise ProcessError(
                f"{tool} error: could not start {cmd[0]}",
                details=f"{command_line}\n{e}",
            ) from e

        try:
            with process.stdin as stdin:
                for resource in resource_set.resources:
                    self.console.info(
                        f"Passing file {resource_set.name}/{resource.filename} to {tool}"
                    )
                    stdin.write(self._document(resource.rendered, tool))
        except OSError as e:
            process.wait()
            raise ProcessError(
                f"{tool} error: could not write resource set '{resource_set.name}'",
                details=f"{command_line}\n{e}",
            ) from e

        returncode = process.wait()
        if returncode != 0:
            raise ProcessError(
                f"{tool} exited with status {returncode} for resource set "
                f"'{resource_set.name}'",
                details=command_line,
            )

    @staticmethod
    def _document(rendered: str, tool: str) -> str:
        text = rendered if rendered.endswith("\n") else rendered + "\n"
        if tool == "kubectl" and not text.startswith("---"):
            return DOCUMENT_SEPARATOR + text
        return text
