"""Cluster configuration loading.

Reads a cluster configuration file, validates it against ``ContextData`` and
flattens its (possibly nested) resource sets into an immutable ``Context``
with the variables of every set already merged.
"""

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

import yaml
from loguru import logger
from pydantic import ValidationError

from kontemplate.core.errors import ConfigError
from kontemplate.core.models import Context, HelmRepository, ResourceSet, freeze
from kontemplate.runtime.config.config_data import ContextData, ResourceSetData


def merge_variables(*layers: Mapping[str, Any] | None) -> dict[str, Any]:
    """Merge variable mappings, later layers winning on conflicting keys."""
    merged: dict[str, Any] = {}
    for layer in layers:
        if layer:
            merged.update(layer)
    return merged


def parse_variable_overrides(assignments: Iterable[str] | None) -> dict[str, str]:
    """Parse ``key=value`` assignments given on the command line.

    Args:
        assignments: Raw ``--var`` values

    Returns:
        Mapping of variable name to value (later assignments win)

    Raises:
        ConfigError: If an assignment has no '=' or an empty key
    """
    overrides: dict[str, str] = {}
    for assignment in assignments or []:
        key, sep, value = assignment.partition("=")
        key = key.strip()
        if not sep or not key:
            raise ConfigError(
                f"Invalid variable assignment '{assignment}'",
                details="Variables must be given as key=value",
            )
        overrides[key] = value
    return overrides


def _read_yaml(file_path: Path, what: str) -> Any:
    try:
        content = file_path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise ConfigError(f"{what} not found: {file_path}") from e
    except OSError as e:
        raise ConfigError(f"Could not read {what} {file_path}", details=str(e)) from e

    try:
        return yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing {what} {file_path}", details=str(e)) from e


def _load_imports(imports: list[str], base_dir: Path) -> dict[str, Any]:
    imported: dict[str, Any] = {}
    for name in imports:
        import_path = base_dir / name
        data = _read_yaml(import_path, "variable file")
        if data is None:
            continue
        if not isinstance(data, dict):
            raise ConfigError(f"Variable file {import_path} must contain a mapping")
        logger.debug(f"Imported {len(data)} variables from {import_path}")
        imported.update(data)
    return imported


def _flatten_resource_sets(
    entries: list[ResourceSetData],
    base_dir: Path,
    *,
    parent: ResourceSetData | None = None,
    parent_name: str | None = None,
    parent_path: Path | None = None,
) -> list[tuple[ResourceSetData, str, Path, dict[str, Any], str | None]]:
    """Expand nested resource sets into (entry, name, path, values, parent) tuples.

    A set with children is a grouping only; its children inherit its values
    and path prefix.
    """
    flattened = []
    for entry in entries:
        name = f"{parent_name}/{entry.name}" if parent_name else entry.name
        path = (parent_path or base_dir) / (entry.path or entry.name)
        values = merge_variables(parent.values if parent else None, entry.values)

        if entry.include:
            inherited = entry.model_copy(update={"values": values})
            flattened.extend(
                _flatten_resource_sets(
                    entry.include,
                    base_dir,
                    parent=inherited,
                    parent_name=name,
                    parent_path=path,
                )
            )
        else:
            flattened.append((entry, name, path, values, parent_name))
    return flattened


def load_context(
    file_path: Path | str, overrides: Mapping[str, Any] | None = None
) -> Context:
    """Load a cluster configuration file into a ``Context``.

    Variables for each resource set are merged with fixed precedence:
    caller overrides > resource-set values > global variables > imported
    variable files. Resource-set template files are not opened here.

    Args:
        file_path: Path to the YAML (or JSON) cluster configuration
        overrides: Caller-supplied variables that win over every other scope

    Returns:
        The loaded, immutable Context

    Raises:
        ConfigError: If the file is missing or malformed, fails validation,
                     or declares the same resource set name twice
    """
    file_path = Path(file_path)
    logger.info(f"Loading cluster configuration from {file_path}")

    raw = _read_yaml(file_path, "configuration file")
    if not isinstance(raw, dict):
        raise ConfigError(
            f"Invalid configuration file {file_path}",
            details="The top level of the file must be a mapping",
        )

    try:
        data = ContextData.model_validate(raw)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration file {file_path}", details=str(e)) from e

    base_dir = file_path.resolve().parent
    global_variables = merge_variables(_load_imports(data.imports, base_dir), data.global_)

    resource_sets: list[ResourceSet] = []
    seen: set[str] = set()
    for entry, name, path, values, parent in _flatten_resource_sets(data.include, base_dir):
        if name in seen:
            raise ConfigError(
                f"Duplicate resource set name '{name}' in {file_path}",
                details="Resource set names must be unique within a context",
            )
        seen.add(name)

        resource_sets.append(
            ResourceSet(
                name=name,
                path=path,
                kind=entry.kind,
                chart=entry.chart,
                values=freeze(values),
                args=tuple(entry.args),
                parent=parent,
                variables=freeze(merge_variables(global_variables, values, overrides)),
            )
        )

    logger.debug(
        f"Loaded context '{data.context}' with {len(resource_sets)} resource sets"
    )

    return Context(
        name=data.context,
        global_variables=freeze(global_variables),
        helm_repositories=tuple(
            HelmRepository(name=repo.name, url=repo.url) for repo in data.helm_repositories
        ),
        resource_sets=tuple(resource_sets),
        base_dir=base_dir,
    )
