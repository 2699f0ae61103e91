"""Resource set rendering.

Renders the templates of every admitted resource set with Jinja2 using the
set's merged variables. A template that fails to render is skipped with a
warning; the rest of the set and the run carry on.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping
from pathlib import Path
from typing import Any

import yaml
from jinja2 import Environment, FileSystemLoader, StrictUndefined
from jinja2 import TemplateError as JinjaTemplateError
from loguru import logger

from kontemplate.core.errors import TemplateError
from kontemplate.core.models import (
    Context,
    RenderedResource,
    RenderedResourceSet,
    ResourceSet,
)
from kontemplate.deployment.shell_commands.runner import CommandRunner
from kontemplate.runtime.config.config_loader import merge_variables
from kontemplate.utils.console_like import ConsoleLike, coalesce_console

from .functions import register_template_functions

TEMPLATE_SUFFIXES = (".yaml", ".yml", ".json")

# Files named default.<suffix> hold per-set default variables, not manifests
DEFAULTS_STEM = "default"


def _matches(resource_set: ResourceSet, names: Collection[str]) -> bool:
    return resource_set.name in names or (
        resource_set.parent is not None and resource_set.parent in names
    )


def filter_resource_sets(
    resource_sets: tuple[ResourceSet, ...] | list[ResourceSet],
    include_names: Collection[str] | None = None,
    exclude_names: Collection[str] | None = None,
) -> list[ResourceSet]:
    """Select the resource sets to render, keeping declaration order.

    A set matches a name if the name equals the set's name or the name of
    its parent. A non-empty include list admits only matching sets; the
    exclude list then removes matching sets unconditionally.
    """
    include_names = include_names or ()
    exclude_names = exclude_names or ()

    selected = []
    for resource_set in resource_sets:
        if include_names and not _matches(resource_set, include_names):
            continue
        if exclude_names and _matches(resource_set, exclude_names):
            logger.debug(f"Excluding resource set '{resource_set.name}'")
            continue
        selected.append(resource_set)
    return selected


def list_template_files(directory: Path) -> list[Path]:
    """Template files of a resource set directory in lexicographic order."""
    if not directory.is_dir():
        return []
    return sorted(
        (
            path
            for path in directory.iterdir()
            if path.is_file()
            and path.suffix in TEMPLATE_SUFFIXES
            and path.stem != DEFAULTS_STEM
        ),
        key=lambda path: path.name,
    )


class TemplateRenderer:
    """Renders resource sets of a context.

    Attributes:
        console: Console receiving warnings for skipped files
        runner: Command runner used by template helpers that shell out
    """

    def __init__(
        self,
        console: ConsoleLike | None = None,
        runner: CommandRunner | None = None,
    ) -> None:
        self.console = coalesce_console(console)
        self.runner = runner

    def render(
        self,
        context: Context,
        include_names: Collection[str] | None = None,
        exclude_names: Collection[str] | None = None,
    ) -> list[RenderedResourceSet]:
        """Render every admitted resource set in declaration order.

        Sets that end up without resources are kept in the result.

        Args:
            context: Loaded cluster context
            include_names: Only render these sets (all when empty)
            exclude_names: Never render these sets

        Returns:
            Rendered resource sets in declaration order
        """
        selected = filter_resource_sets(context.resource_sets, include_names, exclude_names)
        logger.info(
            f"Rendering {len(selected)} of {len(context.resource_sets)} resource sets "
            f"for context '{context.name}'"
        )
        return [self.render_resource_set(resource_set) for resource_set in selected]

    def render_resource_set(self, resource_set: ResourceSet) -> RenderedResourceSet:
        """Render the templates of a single resource set.

        Helm sets render their templates, if the set directory exists, as
        values documents; the chart itself is expanded by helm.
        """
        resources: list[RenderedResource] = []
        template_files = list_template_files(resource_set.path)

        if template_files:
            env = self._build_environment(resource_set.path)
            variables = merge_variables(
                self._load_defaults(resource_set), resource_set.variables
            )
            for template_file in template_files:
                try:
                    rendered = self.render_file(env, template_file.name, variables)
                except TemplateError as e:
                    self.console.warn(
                        f"Skipping {resource_set.name}/{template_file.name}: {e.message}"
                        + (f" ({e.details})" if e.details else "")
                    )
                    continue
                resources.append(RenderedResource(filename=template_file.name, rendered=rendered))
        else:
            logger.debug(f"No templates found for resource set '{resource_set.name}'")

        return RenderedResourceSet(
            name=resource_set.name,
            kind=resource_set.kind,
            chart=resource_set.chart,
            args=resource_set.args,
            resources=tuple(resources),
            parent=resource_set.parent,
        )

    def render_file(
        self, env: Environment, filename: str, variables: Mapping[str, Any]
    ) -> str:
        """Render one template file.

        Raises:
            TemplateError: On syntax errors, undefined variables or failing helpers
        """
        try:
            template = env.get_template(filename)
            return template.render(variables)
        except TemplateError:
            raise
        except JinjaTemplateError as e:
            raise TemplateError(f"Could not render {filename}", details=str(e)) from e
        except Exception as e:
            # Expression and helper failures (e.g. b64dec on bad input,
            # division by zero, recursive insert_template) fail this file only
            raise TemplateError(
                f"Could not render {filename}", details=f"{type(e).__name__}: {e}"
            ) from e

    def _build_environment(self, directory: Path) -> Environment:
        env = Environment(
            loader=FileSystemLoader(directory),
            undefined=StrictUndefined,
            keep_trailing_newline=True,
            autoescape=False,
        )
        register_template_functions(env, directory, self.runner)
        return env

    def _load_defaults(self, resource_set: ResourceSet) -> dict[str, Any]:
        """Load the set's default variables file, if any."""
        for suffix in TEMPLATE_SUFFIXES:
            defaults_file = resource_set.path / f"{DEFAULTS_STEM}{suffix}"
            if not defaults_file.is_file():
                continue
            try:
                data = yaml.safe_load(defaults_file.read_text(encoding="utf-8"))
            except (OSError, yaml.YAMLError) as e:
                self.console.warn(
                    f"Ignoring defaults of resource set '{resource_set.name}': {e}"
                )
                return {}
            if data is None:
                return {}
            if not isinstance(data, dict):
                self.console.warn(
                    f"Ignoring defaults of resource set '{resource_set.name}': "
                    f"{defaults_file.name} is not a mapping"
                )
                return {}
            logger.debug(f"Loaded {len(data)} default variables from {defaults_file}")
            return data
        return {}


def render(
    context: Context,
    include_names: Collection[str] | None = None,
    exclude_names: Collection[str] | None = None,
    console: ConsoleLike | None = None,
) -> list[RenderedResourceSet]:
    """Render the resource sets of ``context``. See ``TemplateRenderer.render``."""
    return TemplateRenderer(console).render(context, include_names, exclude_names)
