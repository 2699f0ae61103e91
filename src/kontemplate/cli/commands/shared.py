"""Options and helpers shared by the CLI commands."""

from pathlib import Path
from typing import Annotated

import typer

from kontemplate.cli.context import CLIContext
from kontemplate.core.models import Context, RenderedResourceSet
from kontemplate.runtime.config import load_context
from kontemplate.templating import TemplateRenderer

ConfigFileArg = Annotated[
    Path,
    typer.Argument(help="Cluster configuration file to use"),
]
IncludeOption = Annotated[
    list[str] | None,
    typer.Option("--include", "-i", help="Resource sets to include explicitly"),
]
ExcludeOption = Annotated[
    list[str] | None,
    typer.Option("--exclude", "-e", help="Resource sets to exclude explicitly"),
]
VarOption = Annotated[
    list[str] | None,
    typer.Option("--var", help="Provide variables to templates explicitly (key=value)"),
]
KubectlOption = Annotated[
    str,
    typer.Option("--kubectl", help="Path to the kubectl binary"),
]
HelmOption = Annotated[
    str,
    typer.Option("--helm", help="Path to the helm binary"),
]


def load_and_render(
    cli: CLIContext, file: Path
) -> tuple[Context, list[RenderedResourceSet]]:
    """Load the cluster configuration and render its resource sets.

    Raises:
        ConfigError: If the configuration cannot be loaded
    """
    context = load_context(file, cli.variables)
    renderer = TemplateRenderer(cli.console, cli.runner)
    return context, renderer.render(context, cli.includes, cli.excludes)
