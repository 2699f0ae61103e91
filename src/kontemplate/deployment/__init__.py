"""Dispatch of rendered resource sets to kubectl and helm."""

from .dispatcher import Dispatcher, build_helm_args, build_kubectl_args

__all__ = ["Dispatcher", "build_helm_args", "build_kubectl_args"]
