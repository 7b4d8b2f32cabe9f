"""Structural metrics over validated G-expressions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from .model import (
    Application,
    Expression,
    Fixpoint,
    Lambda,
    Literal,
    Match,
    Reference,
    Vector,
    encode,
    is_expression,
)
from .validator import validate


@dataclass
class Analysis:
    """Analysis outcome for a single expression."""
    type: str
    structure: Dict[str, Any] = field(default_factory=dict)
    complexity: int = 0
    depth: int = 0

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serializable view."""
        return {
            "type": self.type,
            "structure": self.structure,
            "complexity": self.complexity,
            "depth": self.depth,
        }


def analyze(expr: Any) -> Analysis:
    """Analyze an expression or raw JSON G-expression.

    The input is re-validated first, so invalid input raises the same
    ValidationError the validator would.
    """
    if is_expression(expr):
        expr = validate(encode(expr))
    else:
        expr = validate(expr)
    return Analysis(
        type=expr.tag.value,
        structure=structure(expr),
        complexity=complexity(expr),
        depth=depth(expr),
    )


def children(expr: Expression) -> List[Any]:
    """Return the child positions counted by complexity and depth.

    Opaque values (raw vector elements) are included; callers score them 0.
    """
    if isinstance(expr, (Literal, Reference)):
        return []
    if isinstance(expr, Vector):
        return list(expr.items)
    if isinstance(expr, Application):
        return [expr.function] if expr.arguments is None else [expr.function, expr.arguments]
    if isinstance(expr, Lambda):
        return [expr.body]
    if isinstance(expr, Fixpoint):
        return [expr.inner]
    if isinstance(expr, Match):
        return [expr.scrutinee] + [b.result for b in expr.branches]
    raise TypeError(f"Not a G-expression: {expr!r}")


def complexity(expr: Any) -> int:
    """One per expression node; opaque leaves count 0."""
    if not is_expression(expr):
        return 0
    return 1 + sum(complexity(child) for child in children(expr))


def depth(expr: Any) -> int:
    """One plus the deepest child expression; opaque leaves count 0."""
    if not is_expression(expr):
        return 0
    return 1 + max((depth(child) for child in children(expr)), default=0)


def _value_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "list"
    if isinstance(value, dict):
        return "map"
    return "unknown"


def _element(value: Any) -> Dict[str, Any]:
    if is_expression(value):
        return structure(value)
    return {"type": "literal", "value": value}


def structure(expr: Expression) -> Dict[str, Any]:
    """Recursive descriptive summary mirroring the expression form."""
    if isinstance(expr, Literal):
        return {"type": "literal", "value_type": _value_type(expr.value)}
    if isinstance(expr, Reference):
        return {"type": "reference", "name": expr.name}
    if isinstance(expr, Vector):
        return {
            "type": "vector",
            "length": len(expr.items),
            "elements": [_element(item) for item in expr.items],
        }
    if isinstance(expr, Application):
        return {
            "type": "application",
            "function": structure(expr.function),
            "args": structure(expr.arguments) if expr.arguments is not None else None,
        }
    if isinstance(expr, Lambda):
        return {"type": "lambda", "arity": len(expr.params), "params": list(expr.params)}
    if isinstance(expr, Fixpoint):
        return {"type": "fixpoint", "expr": structure(expr.inner)}
    if isinstance(expr, Match):
        return {"type": "match", "expr": structure(expr.scrutinee), "branches": len(expr.branches)}
    raise TypeError(f"Not a G-expression: {expr!r}")
