"""Data types shared by the loader, renderer and dispatcher.

All types are frozen dataclasses. Variable mappings are exposed as read-only
``MappingProxyType`` views so a loaded ``Context`` cannot be changed after
construction.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any


def freeze(values: Mapping[str, Any] | None = None) -> Mapping[str, Any]:
    """Return a read-only copy of ``values``."""
    return MappingProxyType(dict(values or {}))


class ResourceSetKind(str, Enum):
    """How a resource set is dispatched."""

    KUBECTL = "kubectl"
    HELM = "helm"


@dataclass(frozen=True)
class HelmRepository:
    """A helm chart repository registered before dispatch.

    Attributes:
        name: Local repository alias (e.g., "bitnami")
        url: Repository URL
    """

    name: str
    url: str


@dataclass(frozen=True)
class ResourceSet:
    """A resource set declared in the cluster configuration.

    Attributes:
        name: Unique name within the context ("parent/child" when nested)
        kind: kubectl directory set or helm chart set
        path: Absolute directory holding the set's templates
        chart: Chart reference for helm sets
        values: Variables declared locally on the set
        args: Extra arguments appended to the tool invocation
        parent: Name of the enclosing set for nested sets
        variables: Fully merged variable mapping used for rendering
    """

    name: str
    path: Path
    kind: ResourceSetKind = ResourceSetKind.KUBECTL
    chart: str | None = None
    values: Mapping[str, Any] = field(default_factory=freeze)
    args: tuple[str, ...] = ()
    parent: str | None = None
    variables: Mapping[str, Any] = field(default_factory=freeze)


@dataclass(frozen=True)
class Context:
    """A loaded cluster configuration.

    Attributes:
        name: Cluster context name passed to kubectl/helm
        global_variables: Context-wide variables
        helm_repositories: Repositories to register before dispatch
        resource_sets: Resource sets in declaration order
        base_dir: Directory of the configuration file
    """

    name: str
    global_variables: Mapping[str, Any] = field(default_factory=freeze)
    helm_repositories: tuple[HelmRepository, ...] = ()
    resource_sets: tuple[ResourceSet, ...] = ()
    base_dir: Path = field(default_factory=Path)


@dataclass(frozen=True)
class RenderedResource:
    """A single rendered template."""

    filename: str
    rendered: str


@dataclass(frozen=True)
class RenderedResourceSet:
    """Rendering output for one resource set.

    Sets with no resources are kept so that callers can warn about them.
    """

    name: str
    kind: ResourceSetKind = ResourceSetKind.KUBECTL
    chart: str | None = None
    args: tuple[str, ...] = ()
    resources: tuple[RenderedResource, ...] = ()
    parent: str | None = None

    @property
    def is_empty(self) -> bool:
        return not self.resources
