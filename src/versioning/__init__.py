"""Semantic-version requirements and matching."""

from .matcher import latest, max_satisfying, parse_version, satisfies
from .models import Operator, Requirement
from .parser import parse_requirement

__all__ = [
    "Operator",
    "Requirement",
    "latest",
    "max_satisfying",
    "parse_requirement",
    "parse_version",
    "satisfies",
]
