"""Error taxonomy for expression validation and dependency resolution.

Every error carries a ``kind`` enum member for programmatic handling and a
human-readable message that the CLI surfaces verbatim.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Sequence, Tuple


class ValidationErrorKind(Enum):
    """Kinds of structural validation failures."""
    MISSING_TAG = "missing_tag"
    UNKNOWN_TAG = "unknown_tag"
    MISSING_REQUIRED_FIELD = "missing_required_field"
    WRONG_FIELD_TYPE = "wrong_field_type"
    INVALID_IDENTIFIER = "invalid_identifier"
    NESTED_INVALID = "nested_invalid"


class ResolveErrorKind(Enum):
    """Kinds of dependency resolution failures."""
    PACKAGE_NOT_FOUND = "package_not_found"
    CIRCULAR_DEPENDENCY = "circular_dependency"
    VERSION_CONFLICT = "version_conflict"
    NO_MATCHING_VERSION = "no_matching_version"
    MALFORMED_REQUIREMENT = "malformed_requirement"


class ValidationError(ValueError):
    """Raised when a JSON value is not a well-formed G-expression.

    Attributes:
        kind: The failure kind.
        message: Human-readable description.
        form: Expression form tag the failure belongs to, when known.
        field: Offending field name, when known.
        value: Offending value for identifier failures.
        path: Location of the failing node relative to the validated root.
        cause: Innermost error for NESTED_INVALID failures.
    """

    def __init__(
        self,
        kind: ValidationErrorKind,
        message: str,
        *,
        form: Optional[str] = None,
        field: Optional[str] = None,
        value: Any = None,
        path: str = "",
        cause: Optional["ValidationError"] = None,
    ):
        super().__init__(message)
        self.kind = kind
        self.message = message
        self.form = form
        self.field = field
        self.value = value
        self.path = path
        self.cause = cause

    @property
    def root_cause(self) -> "ValidationError":
        """Return the innermost validation error."""
        err = self
        while err.cause is not None:
            err = err.cause
        return err

    def at(self, path: str) -> "ValidationError":
        """Return a copy of this error located at path."""
        return ValidationError(
            self.kind,
            self.message,
            form=self.form,
            field=self.field,
            value=self.value,
            path=path,
            cause=self.cause,
        )

    def to_dict(self) -> dict:
        """Serialize the error for JSON output."""
        data = {"kind": self.kind.value, "message": self.message}
        if self.path:
            data["path"] = self.path
        if self.cause is not None:
            data["cause"] = self.cause.to_dict()
        return data


class ResolveError(Exception):
    """Base class for terminal dependency resolution failures."""

    kind: ResolveErrorKind

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Serialize the error for JSON output."""
        return {"kind": self.kind.value, "message": self.message}


class PackageNotFoundError(ResolveError):
    """The lookup collaborator has no package with the given name."""

    kind = ResolveErrorKind.PACKAGE_NOT_FOUND

    def __init__(self, name: str, *, dependency: bool = False):
        label = "Dependency" if dependency else "Package"
        super().__init__(f"{label} not found: {name}")
        self.name = name


class CircularDependencyError(ResolveError):
    """A package was re-entered while it was still being resolved."""

    kind = ResolveErrorKind.CIRCULAR_DEPENDENCY

    def __init__(self, cycle: Sequence[str]):
        self.cycle: Tuple[str, ...] = tuple(cycle)
        super().__init__(f"Circular dependency detected: {' -> '.join(self.cycle)}")


class VersionConflictError(ResolveError):
    """An already pinned version does not satisfy a later requirement."""

    kind = ResolveErrorKind.VERSION_CONFLICT

    def __init__(self, name: str, existing: str, requirement: str):
        super().__init__(
            f"Version conflict for {name}: {existing} doesn't match requirement {requirement}"
        )
        self.name = name
        self.existing = existing
        self.requirement = requirement


class NoMatchingVersionError(ResolveError):
    """No available release satisfies a requirement."""

    kind = ResolveErrorKind.NO_MATCHING_VERSION

    def __init__(self, name: str, requirement: str):
        super().__init__(f"No version of {name} matches requirement: {requirement}")
        self.name = name
        self.requirement = requirement


class MalformedRequirementError(ResolveError):
    """A requirement string could not be parsed."""

    kind = ResolveErrorKind.MALFORMED_REQUIREMENT

    def __init__(self, text: str, reason: Optional[str] = None):
        message = f"Malformed version requirement: {text!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
        self.text = text


class PackageIndexError(Exception):
    """Base class for package index (storage collaborator) failures."""


class IndexUnavailableError(PackageIndexError):
    """The package index could not be reached or returned an unusable reply."""


class IndexFormatError(PackageIndexError):
    """An index document does not match the expected format."""


class PackageExistsError(PackageIndexError):
    """A package with the same name is already stored."""


class VersionExistsError(PackageIndexError):
    """The package already has a release with the same version."""
