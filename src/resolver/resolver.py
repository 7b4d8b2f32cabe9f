"""Dependency resolution over a package lookup collaborator.

Resolution is a depth-first walk. The path of packages currently being
resolved travels down the recursion as an immutable tuple and is used only for
cycle detection. Versions are pinned on first encounter; later requirements
on a pinned package must be satisfied by that pin (no backtracking).
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Tuple, Union

from common.logging_utils import Timer, extra_context, is_debug_enabled
from errors import (
    CircularDependencyError,
    NoMatchingVersionError,
    PackageNotFoundError,
    ResolveError,
    VersionConflictError,
)
from registry.index import PackageLookup
from registry.models import Package
from versioning.matcher import latest, max_satisfying, satisfies
from versioning.parser import parse_requirement

from .models import DependencyTree, ErrorLeaf, ResolvedSet

logger = logging.getLogger(__name__)

Path = Tuple[str, ...]


class DependencyResolver:
    """Resolve packages against a lookup collaborator.

    The resolver keeps no state between calls, so one instance may serve
    concurrent resolutions if the lookup is safe for concurrent reads.
    """

    def __init__(self, lookup: PackageLookup):
        self.lookup = lookup

    def resolve(self, root_name: str) -> ResolvedSet:
        """Resolve root_name and its transitive dependencies.

        The root is pinned to its latest release.

        Raises:
            ResolveError: On the first failure; no partial result is returned.
        """
        with Timer() as t:
            root = self._fetch_root(root_name)
            resolved: ResolvedSet = {root.name: latest(root.version_strings)}
            self._walk(root.dependencies, resolved, (root.name,))
        if is_debug_enabled(logger):
            logger.debug(
                "Resolved dependencies",
                extra=extra_context(
                    event="resolve",
                    component="resolver",
                    outcome="success",
                    target=root_name,
                    count=len(resolved),
                    duration_ms=t.duration_ms(),
                ),
            )
        return resolved

    def resolve_from_requirements(self, requirements: Mapping[str, str]) -> ResolvedSet:
        """Resolve a standalone requirement map with no owning package."""
        resolved: ResolvedSet = {}
        self._walk(requirements, resolved, ())
        return resolved

    def build_tree(self, root_name: str) -> DependencyTree:
        """Build a display tree for root_name.

        Failing branches become ErrorLeaf children; only a missing root raises.
        """
        root = self._fetch_root(root_name)
        return self._tree_node(root, latest(root.version_strings), None, (root.name,))

    def _fetch_root(self, name: str) -> Package:
        pkg = self.lookup.get_package_with_versions(name)
        if pkg is None:
            raise PackageNotFoundError(name)
        return pkg

    def _walk(self, requirements: Mapping[str, str], resolved: ResolvedSet, path: Path) -> None:
        for dep_name, requirement in requirements.items():
            self._resolve_dependency(dep_name, requirement, resolved, path)

    def _resolve_dependency(
        self, name: str, requirement: str, resolved: ResolvedSet, path: Path
    ) -> None:
        if name in path:
            raise CircularDependencyError(path + (name,))
        req = parse_requirement(requirement)

        if name in resolved:
            if not satisfies(resolved[name], req):
                raise VersionConflictError(name, resolved[name], requirement)
            return

        pkg = self.lookup.get_package_with_versions(name)
        if pkg is None:
            raise PackageNotFoundError(name, dependency=True)
        version = max_satisfying(pkg.version_strings, req)
        if version is None:
            raise NoMatchingVersionError(name, requirement)

        logger.debug("Pinned %s %s for %s", name, version, requirement)
        resolved[name] = version
        self._walk(pkg.dependencies, resolved, path + (name,))

    def _tree_node(
        self, pkg: Package, version: str, requirement: Optional[str], path: Path
    ) -> DependencyTree:
        children = [
            self._tree_child(dep_name, dep_req, path)
            for dep_name, dep_req in pkg.dependencies.items()
        ]
        return DependencyTree(
            name=pkg.name, version=version, requirement=requirement, children=children
        )

    def _tree_child(
        self, name: str, requirement: str, path: Path
    ) -> Union[DependencyTree, ErrorLeaf]:
        try:
            if name in path:
                raise CircularDependencyError(path + (name,))
            req = parse_requirement(requirement)
            pkg = self.lookup.get_package_with_versions(name)
            if pkg is None:
                raise PackageNotFoundError(name, dependency=True)
            version = max_satisfying(pkg.version_strings, req)
            if version is None:
                raise NoMatchingVersionError(name, requirement)
        except ResolveError as err:
            logger.debug("Tree branch %s failed: %s", name, err.message)
            return ErrorLeaf(name=name, requirement=requirement, kind=err.kind, message=err.message)
        return self._tree_node(pkg, version, requirement, path + (name,))


def resolve(root_name: str, lookup: PackageLookup) -> ResolvedSet:
    """Resolve root_name against lookup. See DependencyResolver.resolve."""
    return DependencyResolver(lookup).resolve(root_name)


def resolve_from_requirements(requirements: Mapping[str, str], lookup: PackageLookup) -> ResolvedSet:
    """Resolve a requirement map against lookup."""
    return DependencyResolver(lookup).resolve_from_requirements(requirements)


def build_tree(root_name: str, lookup: PackageLookup) -> DependencyTree:
    """Build a dependency tree for root_name against lookup."""
    return DependencyResolver(lookup).build_tree(root_name)
