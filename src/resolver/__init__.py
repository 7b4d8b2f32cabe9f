"""Dependency resolution."""

from .models import DependencyTree, ErrorLeaf, ResolvedSet
from .resolver import DependencyResolver, build_tree, resolve, resolve_from_requirements

__all__ = [
    "DependencyResolver",
    "DependencyTree",
    "ErrorLeaf",
    "ResolvedSet",
    "build_tree",
    "resolve",
    "resolve_from_requirements",
]
