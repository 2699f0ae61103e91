"""Kontemplate - simple Kubernetes resource templating.

Renders resource-set templates from a cluster configuration file and hands
the result to kubectl or helm against a named cluster context.
"""

__version__ = "1.7.0"

# Stamped by release builds with the short commit hash
__git_commit__ = ""
