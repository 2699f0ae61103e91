"""Main CLI application module.

This module provides the main entry point for the kontemplate CLI.

Commands:
- template: Template resource sets and print them
- apply: Template resources and pass to 'kubectl apply'
- replace: Template resources and pass to 'kubectl replace'
- delete: Template resources and pass to 'kubectl delete'
- create: Template resources and pass to 'kubectl create'
- version: Show kontemplate version
"""

import typer

from .commands import apply, create, delete, replace, template_command, version_command
from .shared.logging import configure_logging

app = typer.Typer(
    name="kontemplate",
    help="simple Kubernetes resource templating",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def _setup() -> None:
    configure_logging()


app.command("template")(template_command)
app.command("apply")(apply)
app.command("replace")(replace)
app.command("delete")(delete)
app.command("create")(create)
app.command("version")(version_command)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
