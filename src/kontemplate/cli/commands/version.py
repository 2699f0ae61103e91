"""The ``version`` command."""

import typer

from kontemplate import __git_commit__, __version__


def version_string(version: str = __version__, git_commit: str = __git_commit__) -> str:
    if git_commit:
        return f"Kontemplate version {version} (git commit: {git_commit})"
    return f"Kontemplate version {version} (git commit unknown)"


def version_command() -> None:
    """Show kontemplate version."""
    typer.echo(version_string())
