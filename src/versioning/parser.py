"""Requirement string parsing.

Recognized forms: ``~> X.Y[.Z]``, ``>= V``, ``> V``, ``<= V``, ``< V``, ``== V``
and a bare ``X.Y.Z`` which means ``== X.Y.Z``.
"""

import re
from typing import List, Optional, Tuple

import semantic_version

from errors import MalformedRequirementError

from .models import Operator, Requirement

# Longest prefixes first so ">=" is not read as ">" followed by "=1.0.0".
_PREFIXES: List[Tuple[str, Operator]] = [
    ("~>", Operator.COMPATIBLE),
    (">=", Operator.GTE),
    (">", Operator.GT),
    ("<=", Operator.LTE),
    ("<", Operator.LT),
    ("==", Operator.EQ),
]

_REQ_VERSION_RE = re.compile(
    r"^(?P<major>\d+)\.(?P<minor>\d+)(?:\.(?P<patch>\d+))?"
    r"(?:-(?P<prerelease>[0-9A-Za-z\-\.]+))?"
    r"(?:\+(?P<build>[0-9A-Za-z\-\.]+))?$"
)
_BARE_RE = re.compile(r"^\d+\.\d+\.\d+")


def _split_prefix(text: str) -> Tuple[Optional[Operator], str]:
    for prefix, operator in _PREFIXES:
        if text.startswith(prefix):
            return operator, text[len(prefix):].strip()
    return None, text


def _parse_version(raw: str, text: str) -> Tuple[semantic_version.Version, int]:
    m = _REQ_VERSION_RE.match(raw)
    if not m:
        raise MalformedRequirementError(text, f"invalid version '{raw}'")
    prerelease = tuple(m.group("prerelease").split(".")) if m.group("prerelease") else ()
    build = tuple(m.group("build").split(".")) if m.group("build") else ()
    try:
        version = semantic_version.Version(
            major=int(m.group("major")),
            minor=int(m.group("minor")),
            patch=int(m.group("patch") or 0),
            prerelease=prerelease,
            build=build,
        )
    except ValueError as exc:
        raise MalformedRequirementError(text, str(exc)) from exc
    precision = 3 if m.group("patch") is not None else 2
    return version, precision


def parse_requirement(text: str) -> Requirement:
    """Parse a requirement string.

    Args:
        text: Requirement such as ``"~> 1.2"``, ``">= 1.0.0"`` or ``"1.0.0"``.

    Returns:
        The parsed Requirement.

    Raises:
        MalformedRequirementError: If text is not a recognized requirement.
    """
    if not isinstance(text, str) or not text.strip():
        raise MalformedRequirementError(str(text), "empty requirement")
    stripped = text.strip()
    operator, rest = _split_prefix(stripped)
    if operator is None:
        if not _BARE_RE.match(stripped):
            raise MalformedRequirementError(text, "missing operator")
        operator = Operator.EQ
    if not rest:
        raise MalformedRequirementError(text, "missing version")
    version, precision = _parse_version(rest, text)
    return Requirement(raw=stripped, operator=operator, version=version, precision=precision)
