"""Cluster commands: apply, replace, delete and create.

Each command renders the resource sets of a cluster configuration and pipes
them into kubectl (or helm for chart sets) against the configured context.
"""

from pathlib import Path
from typing import Annotated

import typer

from kontemplate.cli.context import CLIContext, build_cli_context
from kontemplate.cli.shared.console import with_error_handling
from kontemplate.deployment import Dispatcher

from .shared import (
    ConfigFileArg,
    ExcludeOption,
    HelmOption,
    IncludeOption,
    KubectlOption,
    VarOption,
    load_and_render,
)

APPLY_KUBECTL_ARGS = ("apply", "-f", "-")
REPLACE_KUBECTL_ARGS = ("replace", "--save-config=true", "-f", "-")
DELETE_KUBECTL_ARGS = ("delete", "-f", "-")
CREATE_KUBECTL_ARGS = ("create", "--save-config=true", "-f", "-")

# helm has no separate replace/create; install-or-upgrade covers both
UPGRADE_HELM_ARGS = ("upgrade", "-i", "-f", "-")

DRY_RUN_FLAG = "--dry-run"


def with_dry_run(args: tuple[str, ...]) -> tuple[str, ...]:
    return (*args, DRY_RUN_FLAG)


def run_cluster_operation(
    cli: CLIContext,
    file: Path,
    kubectl_args: tuple[str, ...],
    helm_args: tuple[str, ...] | None,
    *,
    register_repositories: bool = True,
) -> None:
    """Load, render and dispatch a cluster configuration.

    Args:
        cli: Options of this invocation
        file: Cluster configuration file
        kubectl_args: Leading kubectl arguments for the operation
        helm_args: Leading helm arguments, or None to skip helm sets
        register_repositories: Run ``helm repo add`` before dispatching

    Raises:
        ConfigError: If the configuration cannot be loaded
        ProcessError: If kubectl or helm fails
    """
    context, rendered_sets = load_and_render(cli, file)
    dispatcher = Dispatcher(
        cli.runner,
        kubectl_bin=cli.kubectl_bin,
        helm_bin=cli.helm_bin,
        console=cli.console,
    )

    if register_repositories:
        dispatcher.register_helm_repositories(context)

    dispatcher.apply(context, kubectl_args, helm_args, rendered_sets)
    cli.console.ok(f"Finished '{kubectl_args[0]}' for context '{context.name}'")


@with_error_handling
def apply(
    file: ConfigFileArg,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Print remote operations without executing them"),
    ] = False,
    include: IncludeOption = None,
    exclude: ExcludeOption = None,
    var: VarOption = None,
    kubectl: KubectlOption = "kubectl",
    helm: HelmOption = "helm",
) -> None:
    """Template resources and pass to 'kubectl apply'.

    Helm chart sets are passed to 'helm upgrade -i'.

    Examples:
        kontemplate apply cluster.yaml
        kontemplate apply cluster.yaml --dry-run -i frontend
    """
    cli = build_cli_context(
        includes=include, excludes=exclude, variables=var, kubectl_bin=kubectl, helm_bin=helm
    )
    kubectl_args, helm_args = APPLY_KUBECTL_ARGS, UPGRADE_HELM_ARGS
    if dry_run:
        kubectl_args, helm_args = with_dry_run(kubectl_args), with_dry_run(helm_args)

    run_cluster_operation(cli, file, kubectl_args, helm_args)


@with_error_handling
def replace(
    file: ConfigFileArg,
    include: IncludeOption = None,
    exclude: ExcludeOption = None,
    var: VarOption = None,
    kubectl: KubectlOption = "kubectl",
    helm: HelmOption = "helm",
) -> None:
    """Template resources and pass to 'kubectl replace'."""
    cli = build_cli_context(
        includes=include, excludes=exclude, variables=var, kubectl_bin=kubectl, helm_bin=helm
    )
    run_cluster_operation(cli, file, REPLACE_KUBECTL_ARGS, UPGRADE_HELM_ARGS)


@with_error_handling
def delete(
    file: ConfigFileArg,
    include: IncludeOption = None,
    exclude: ExcludeOption = None,
    var: VarOption = None,
    kubectl: KubectlOption = "kubectl",
    helm: HelmOption = "helm",
) -> None:
    """Template resources and pass to 'kubectl delete'.

    Helm chart sets are skipped.
    """
    cli = build_cli_context(
        includes=include, excludes=exclude, variables=var, kubectl_bin=kubectl, helm_bin=helm
    )
    run_cluster_operation(
        cli, file, DELETE_KUBECTL_ARGS, None, register_repositories=False
    )


@with_error_handling
def create(
    file: ConfigFileArg,
    include: IncludeOption = None,
    exclude: ExcludeOption = None,
    var: VarOption = None,
    kubectl: KubectlOption = "kubectl",
    helm: HelmOption = "helm",
) -> None:
    """Template resources and pass to 'kubectl create'."""
    cli = build_cli_context(
        includes=include, excludes=exclude, variables=var, kubectl_bin=kubectl, helm_bin=helm
    )
    run_cluster_operation(cli, file, CREATE_KUBECTL_ARGS, UPGRADE_HELM_ARGS)
