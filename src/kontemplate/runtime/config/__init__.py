"""Cluster configuration loading."""

from .config_loader import load_context, merge_variables, parse_variable_overrides

__all__ = ["load_context", "merge_variables", "parse_variable_overrides"]
