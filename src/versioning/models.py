"""Data models for version requirements."""

from dataclasses import dataclass
from enum import Enum

import semantic_version


class Operator(Enum):
    """Requirement operators, keyed by their textual prefix."""
    COMPATIBLE = "~>"
    GTE = ">="
    GT = ">"
    LTE = "<="
    LT = "<"
    EQ = "=="


@dataclass(frozen=True)
class Requirement:
    """Parsed dependency constraint.

    ``precision`` is the number of numeric components written in the
    requirement (2 for ``~> 1.2``, 3 for ``~> 1.2.3``).
    """
    raw: str
    operator: Operator
    version: semantic_version.Version
    precision: int = 3

    def __str__(self) -> str:
        return self.raw
