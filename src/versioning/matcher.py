"""Version matching against parsed requirements."""

import logging
from typing import Iterable, List, Optional, Tuple, Union

import semantic_version

from constants import Constants

from .models import Operator, Requirement
from .parser import parse_requirement

logger = logging.getLogger(__name__)

VersionLike = Union[str, semantic_version.Version]


def parse_version(version: VersionLike) -> Optional[semantic_version.Version]:
    """Parse a concrete release version, returning None when invalid."""
    if isinstance(version, semantic_version.Version):
        return version
    try:
        return semantic_version.Version(str(version).strip())
    except ValueError:
        return None


def precedence(version: semantic_version.Version) -> semantic_version.Version:
    """Drop build metadata so comparisons follow semver precedence only."""
    return semantic_version.Version(
        major=version.major,
        minor=version.minor,
        patch=version.patch,
        prerelease=version.prerelease,
    )


def _compatible(v: semantic_version.Version, req: Requirement) -> bool:
    r = req.version
    if v.major != r.major:
        return False
    # "~> X.0" spans the whole major; otherwise stay within the minor.
    if r.minor == 0 and r.patch == 0:
        return True
    return v.minor == r.minor


def satisfies(version: VersionLike, requirement: Union[str, Requirement]) -> bool:
    """Return True if version satisfies requirement.

    Args:
        version: Concrete version string or Version.
        requirement: Requirement string or parsed Requirement.

    Raises:
        MalformedRequirementError: If requirement is a malformed string.
    """
    req = requirement if isinstance(requirement, Requirement) else parse_requirement(requirement)
    parsed = parse_version(version)
    if parsed is None:
        return False
    v = precedence(parsed)
    r = precedence(req.version)
    op = req.operator
    if op is Operator.EQ:
        return v == r
    if op is Operator.GT:
        return v > r
    if op is Operator.GTE:
        return v >= r
    if op is Operator.LT:
        return v < r
    if op is Operator.LTE:
        return v <= r
    return v >= r and _compatible(v, req)


def _parse_candidates(candidates: Iterable[str]) -> List[Tuple[semantic_version.Version, str]]:
    parsed = []
    for candidate in candidates:
        v = parse_version(candidate)
        if v is None:
            logger.warning("Skipping invalid semantic version %r", candidate)
            continue
        parsed.append((precedence(v), candidate))
    return parsed


def latest(candidates: Iterable[str]) -> str:
    """Return the highest candidate version, or the sentinel for an empty set."""
    parsed = _parse_candidates(candidates)
    if not parsed:
        return Constants.SENTINEL_VERSION
    return max(parsed, key=lambda item: item[0])[1]


def max_satisfying(candidates: Iterable[str], requirement: Union[str, Requirement]) -> Optional[str]:
    """Return the highest candidate satisfying requirement, or None."""
    req = requirement if isinstance(requirement, Requirement) else parse_requirement(requirement)
    matching = [(v, raw) for v, raw in _parse_candidates(candidates) if satisfies(v, req)]
    if not matching:
        return None
    return max(matching, key=lambda item: item[0])[1]
