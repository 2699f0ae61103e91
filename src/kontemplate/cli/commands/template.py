"""The ``template`` command: render resource sets without touching a cluster."""

from pathlib import Path
from typing import Annotated

import typer

from kontemplate.cli.context import build_cli_context
from kontemplate.cli.shared.console import CLIConsole, with_error_handling
from kontemplate.core.errors import KontemplateError
from kontemplate.core.models import RenderedResourceSet

from .shared import ConfigFileArg, ExcludeOption, IncludeOption, VarOption, load_and_render


def output_filename(resource_set: RenderedResourceSet, filename: str) -> str:
    """Flat output file name for a rendered resource.

    Nested resource sets contain slashes in their names; these are replaced
    with dashes so all files land in a single directory.
    """
    set_name = resource_set.name.replace("/", "-")
    return f"{set_name}-{filename}"


def write_resource_set(
    output_dir: Path, resource_set: RenderedResourceSet, console: CLIConsole
) -> None:
    """Write each rendered resource of a set into ``output_dir``.

    Raises:
        KontemplateError: If the directory or a file cannot be written
    """
    try:
        output_dir.mkdir(mode=0o775, parents=True, exist_ok=True)
    except OSError as e:
        raise KontemplateError(
            f"Could not create output directory {output_dir}", details=str(e)
        ) from e

    for resource in resource_set.resources:
        file_path = output_dir / output_filename(resource_set, resource.filename)
        console.info(f"Writing file {file_path}")
        try:
            file_path.write_text(resource.rendered, encoding="utf-8")
        except OSError as e:
            raise KontemplateError(f"Error writing file {file_path}", details=str(e)) from e


@with_error_handling
def template_command(
    file: ConfigFileArg,
    output: Annotated[
        Path | None,
        typer.Option(
            "--output",
            "-o",
            help="Output directory in which to save templated files instead of printing them",
        ),
    ] = None,
    include: IncludeOption = None,
    exclude: ExcludeOption = None,
    var: VarOption = None,
) -> None:
    """Template resource sets and print them.

    Examples:
        kontemplate template cluster.yaml
        kontemplate template cluster.yaml -i frontend -o rendered/
    """
    cli = build_cli_context(includes=include, excludes=exclude, variables=var)
    _, rendered_sets = load_and_render(cli, file)

    for resource_set in rendered_sets:
        if resource_set.is_empty:
            cli.console.warn(
                f"Resource set '{resource_set.name}' does not exist or contains no valid templates"
            )
            continue

        if output is not None:
            write_resource_set(output, resource_set, cli.console)
            continue

        for resource in resource_set.resources:
            cli.console.info(f"Rendered file {resource_set.name}/{resource.filename}:")
            # Plain echo: rendered YAML must not be interpreted as rich markup
            typer.echo(resource.rendered)
