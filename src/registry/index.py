"""Package lookup collaborators.

``PackageLookup`` is the only interface the resolver consumes. The in-memory
index doubles as the storage layer for the CLI and tests: it gates releases
with the expression validator and records content checksums.
"""

from __future__ import annotations

import json
import logging
import os
import re
import threading
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, Dict, Iterable, List, Optional

import yaml
from jsonschema import Draft7Validator

from constants import Constants
from errors import (
    IndexFormatError,
    PackageExistsError,
    ValidationError,
    ValidationErrorKind,
    VersionExistsError,
)
from gexpr.model import checksum
from gexpr.validator import validate

from .models import Package, VersionedRelease

logger = logging.getLogger(__name__)

_VERSION_RE = re.compile(Constants.VERSION_PATTERN)
_NAME_RE = re.compile(Constants.PACKAGE_NAME_PATTERN)

INDEX_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "required": ["packages"],
    "properties": {
        "packages": {
            "type": "array",
            "items": {
                "type": "object",
                "required": ["name"],
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "title": {"type": ["string", "null"]},
                    "description": {"type": ["string", "null"]},
                    "dependencies": {
                        "type": "object",
                        "additionalProperties": {"type": "string"},
                    },
                    "versions": {
                        "type": "array",
                        "items": {
                            "anyOf": [
                                {"type": "string"},
                                {
                                    "type": "object",
                                    "required": ["version"],
                                    "properties": {
                                        "version": {"type": "string"},
                                        "expression_data": {},
                                    },
                                },
                            ]
                        },
                    },
                },
            },
        }
    },
}


class PackageLookup(ABC):
    """Read-only access to package metadata by name."""

    @abstractmethod
    def get_package_with_versions(self, name: str) -> Optional[Package]:
        """Return the package with its dependencies and versions, or None."""


class InMemoryPackageIndex(PackageLookup):
    """Thread-safe in-memory package store."""

    def __init__(self, packages: Optional[Iterable[Package]] = None):
        self._lock = threading.Lock()
        self._packages: Dict[str, Package] = {}
        for pkg in packages or []:
            self._packages[pkg.name] = pkg

    def get_package_with_versions(self, name: str) -> Optional[Package]:
        with self._lock:
            pkg = self._packages.get(name)
            if pkg is None:
                return None
            # Snapshot so callers never observe later mutations.
            return replace(pkg, dependencies=dict(pkg.dependencies), versions=list(pkg.versions))

    def list_packages(self) -> List[str]:
        """Return stored package names in sorted order."""
        with self._lock:
            return sorted(self._packages)

    def create_package(
        self,
        name: str,
        dependencies: Optional[Dict[str, str]] = None,
        *,
        title: Optional[str] = None,
        description: Optional[str] = None,
    ) -> Package:
        """Create an empty package.

        Raises:
            ValidationError: If the name is not a valid package name.
            PackageExistsError: If the name is taken.
        """
        if not (
            _NAME_RE.fullmatch(name or "")
            and Constants.PACKAGE_NAME_MIN_LENGTH <= len(name) <= Constants.PACKAGE_NAME_MAX_LENGTH
        ):
            raise ValidationError(
                ValidationErrorKind.INVALID_IDENTIFIER,
                f"Package name {name!r} must start with a letter and contain only lowercase "
                "letters, numbers, and underscores",
                field="name",
                value=name,
            )
        with self._lock:
            if name in self._packages:
                raise PackageExistsError(f"Package already exists: {name}")
            pkg = Package(
                name=name,
                dependencies=dict(dependencies or {}),
                title=title,
                description=description,
            )
            self._packages[name] = pkg
        logger.debug("Created package %s", name)
        return pkg

    def set_dependencies(self, name: str, dependencies: Dict[str, str]) -> None:
        """Replace the declared dependencies of a package."""
        with self._lock:
            self._require(name).dependencies = dict(dependencies)

    def add_version(self, name: str, version: str, expression_data: Any) -> VersionedRelease:
        """Publish a new release after validating its expression.

        Raises:
            KeyError: If the package does not exist.
            ValidationError: If version or expression_data is malformed.
            VersionExistsError: If the version is already published.
        """
        if not isinstance(version, str) or not _VERSION_RE.fullmatch(version):
            raise ValidationError(
                ValidationErrorKind.WRONG_FIELD_TYPE,
                f"Version {version!r} must be a valid semantic version "
                "(e.g., 1.0.0, 1.0.0-alpha, 1.0.0+build)",
                field="version",
                value=version,
            )
        validate(expression_data)
        release = VersionedRelease(
            version=version,
            expression_data=expression_data,
            checksum=checksum(expression_data),
        )
        with self._lock:
            pkg = self._require(name)
            if pkg.get_version(version) is not None:
                raise VersionExistsError(f"{name} {version} already exists")
            pkg.versions.append(release)
        logger.debug("Published %s %s", name, version)
        return release

    def delete_version(self, name: str, version: str) -> bool:
        """Remove a release; returns False when it did not exist."""
        with self._lock:
            pkg = self._require(name)
            kept = [r for r in pkg.versions if r.version != version]
            removed = len(kept) != len(pkg.versions)
            pkg.versions = kept
        return removed

    def delete_package(self, name: str) -> bool:
        """Remove a package and all its releases."""
        with self._lock:
            return self._packages.pop(name, None) is not None

    def list_dependents(self, name: str) -> List[Dict[str, Any]]:
        """List packages declaring a dependency on name, with their requirement."""
        with self._lock:
            return [
                {
                    "name": pkg.name,
                    "title": pkg.title,
                    "version_requirement": pkg.dependencies[name],
                }
                for pkg in sorted(self._packages.values(), key=lambda p: p.name)
                if name in pkg.dependencies
            ]

    def _require(self, name: str) -> Package:
        pkg = self._packages.get(name)
        if pkg is None:
            raise KeyError(f"Package not found: {name}")
        return pkg

    @classmethod
    def from_document(cls, document: Any, *, strict: bool = True) -> "InMemoryPackageIndex":
        """Build an index from a parsed index document.

        With ``strict`` every release's expression_data is validated and
        checksummed; otherwise releases are loaded as-is.

        Raises:
            IndexFormatError: If the document does not match INDEX_SCHEMA.
            ValidationError: If strict and a release carries an invalid expression.
        """
        validator = Draft7Validator(INDEX_SCHEMA)
        errs = sorted(validator.iter_errors(document), key=lambda e: list(e.path))
        if errs:
            first = errs[0]
            path = "/".join(str(p) for p in first.path)
            raise IndexFormatError(f"Invalid index at '{path}': {first.message}")

        index = cls()
        for entry in document["packages"]:
            pkg = Package.from_dict(entry)
            if pkg.name in index._packages:
                raise IndexFormatError(f"Duplicate package in index: {pkg.name}")
            if strict:
                releases = pkg.versions
                pkg.versions = []
                index._packages[pkg.name] = pkg
                for release in releases:
                    if release.expression_data is None:
                        pkg.versions.append(release)
                    else:
                        index.add_version(pkg.name, release.version, release.expression_data)
            else:
                index._packages[pkg.name] = pkg
        return index


def load_index_file(path: str, *, strict: bool = True) -> InMemoryPackageIndex:
    """Load a YAML or JSON index document from disk.

    Raises:
        FileNotFoundError: If path does not exist.
        IndexFormatError: If the file cannot be parsed or fails the schema.
    """
    if not os.path.isfile(path):
        raise FileNotFoundError(path)
    with open(path, "r", encoding="utf-8") as f:
        try:
            if path.lower().endswith(".json"):
                document = json.load(f)
            else:
                document = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise IndexFormatError(f"Could not parse index file {path}: {exc}") from exc
    logger.info("Loaded package index from %s", path)
    return InMemoryPackageIndex.from_document(document, strict=strict)
