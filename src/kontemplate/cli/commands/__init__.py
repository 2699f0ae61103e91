"""CLI commands.

- template: render resource sets and print or save them
- apply / replace / delete / create: render and pass to kubectl or helm
- version: show the kontemplate version
"""

from .cluster import apply, create, delete, replace
from .template import template_command
from .version import version_command

__all__ = [
    "apply",
    "create",
    "delete",
    "replace",
    "template_command",
    "version_command",
]
