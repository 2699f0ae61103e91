"""Core data model and error types."""

from .errors import ConfigError, KontemplateError, ProcessError, TemplateError
from .models import (
    Context,
    HelmRepository,
    RenderedResource,
    RenderedResourceSet,
    ResourceSet,
    ResourceSetKind,
)

__all__ = [
    "ConfigError",
    "Context",
    "HelmRepository",
    "KontemplateError",
    "ProcessError",
    "RenderedResource",
    "RenderedResourceSet",
    "ResourceSet",
    "ResourceSetKind",
    "TemplateError",
]
