"""G-expression model, validation and analysis."""

from .analyzer import Analysis, analyze
from .formatting import format_expression
from .model import (
    Application,
    Branch,
    Expression,
    Fixpoint,
    Lambda,
    Literal,
    Match,
    Reference,
    Vector,
    checksum,
    encode,
)
from .validator import is_valid, suggest_fixes, validate, validate_package

__all__ = [
    "Analysis",
    "Application",
    "Branch",
    "Expression",
    "Fixpoint",
    "Lambda",
    "Literal",
    "Match",
    "Reference",
    "Vector",
    "analyze",
    "checksum",
    "encode",
    "format_expression",
    "is_valid",
    "suggest_fixes",
    "validate",
    "validate_package",
]
