"""Jinja2-based resource set rendering."""

from .renderer import TemplateRenderer, filter_resource_sets, list_template_files, render

__all__ = ["TemplateRenderer", "filter_resource_sets", "list_template_files", "render"]
