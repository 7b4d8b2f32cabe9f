"""Data model for G-expressions.

Each expression form is a frozen dataclass; ``Expression`` is the closed union
of the seven forms. Values that are not expressions (vector elements without a
``g`` key, match patterns) are kept as opaque raw JSON values.
"""

from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple, Union

from constants import ExpressionTags


@dataclass(frozen=True)
class Literal:
    """Literal scalar or array value."""
    value: Any

    tag = ExpressionTags.LITERAL


@dataclass(frozen=True)
class Reference:
    """Reference to a named binding."""
    name: str

    tag = ExpressionTags.REFERENCE


@dataclass(frozen=True)
class Vector:
    """Ordered sequence of expressions and opaque literal values."""
    items: Tuple[Any, ...] = ()

    tag = ExpressionTags.VECTOR


@dataclass(frozen=True)
class Application:
    """Function application; ``arguments`` is None for partial application."""
    function: "Expression"
    arguments: Optional["Expression"] = None

    tag = ExpressionTags.APPLICATION


@dataclass(frozen=True)
class Lambda:
    """Anonymous function with positional parameters."""
    params: Tuple[str, ...]
    body: "Expression"

    tag = ExpressionTags.LAMBDA


@dataclass(frozen=True)
class Fixpoint:
    """Fixed-point combinator applied to an inner expression."""
    inner: "Expression"

    tag = ExpressionTags.FIXPOINT


@dataclass(frozen=True)
class Branch:
    """Single match branch; ``pattern`` is kept as raw JSON."""
    pattern: Any
    result: "Expression"


@dataclass(frozen=True)
class Match:
    """Pattern match over a scrutinee expression."""
    scrutinee: "Expression"
    branches: Tuple[Branch, ...] = ()

    tag = ExpressionTags.MATCH


Expression = Union[Literal, Reference, Vector, Application, Lambda, Fixpoint, Match]
EXPRESSION_TYPES = (Literal, Reference, Vector, Application, Lambda, Fixpoint, Match)


def is_expression(value: Any) -> bool:
    """Return True if value is one of the expression dataclasses."""
    return isinstance(value, EXPRESSION_TYPES)


def is_tagged(value: Any) -> bool:
    """Return True if a raw JSON value looks like an encoded expression."""
    return isinstance(value, dict) and "g" in value


def encode(expr: Expression) -> dict:
    """Encode an expression into its ``{"g": ..., "v": ...}`` wire form."""
    if isinstance(expr, Literal):
        payload: Any = expr.value
    elif isinstance(expr, Reference):
        payload = expr.name
    elif isinstance(expr, Vector):
        payload = [encode(item) if is_expression(item) else item for item in expr.items]
    elif isinstance(expr, Application):
        payload = {"fn": encode(expr.function)}
        if expr.arguments is not None:
            payload["args"] = encode(expr.arguments)
    elif isinstance(expr, Lambda):
        payload = {"params": list(expr.params), "body": encode(expr.body)}
    elif isinstance(expr, Fixpoint):
        payload = encode(expr.inner)
    elif isinstance(expr, Match):
        payload = {
            "expr": encode(expr.scrutinee),
            "branches": [
                {"pattern": b.pattern, "result": encode(b.result)} for b in expr.branches
            ],
        }
    else:
        raise TypeError(f"Not a G-expression: {expr!r}")
    return {"g": expr.tag.value, "v": payload}


def checksum(expression_data: Any) -> str:
    """Return the hex SHA-256 of the sorted-key JSON encoding of expression_data.

    Expression objects are encoded first; raw JSON is hashed as given.
    """
    if is_expression(expression_data):
        expression_data = encode(expression_data)
    canonical = json.dumps(expression_data, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


# Constructor shortcuts

def lit(value: Any) -> Literal:
    """Create a literal."""
    return Literal(value)


def ref(name: str) -> Reference:
    """Create a reference."""
    return Reference(name)


def vec(items: Iterable[Any]) -> Vector:
    """Create a vector."""
    return Vector(tuple(items))


def app(function: Expression, arguments: Optional[Expression] = None) -> Application:
    """Create an application; omit arguments for partial application."""
    return Application(function, arguments)


def lam(params: Iterable[str], body: Expression) -> Lambda:
    """Create a lambda."""
    return Lambda(tuple(params), body)


def fix(inner: Expression) -> Fixpoint:
    """Create a fixed-point expression."""
    return Fixpoint(inner)


def branch(pattern: Any, result: Expression) -> Branch:
    """Create a match branch."""
    return Branch(pattern, result)


def match(scrutinee: Expression, branches: Iterable[Branch]) -> Match:
    """Create a match expression."""
    return Match(scrutinee, tuple(branches))


def curry_app(function: Expression, arguments: Iterable[Expression]) -> Expression:
    """Apply function to each argument in turn: ``app(app(f, a), b)``."""
    result = function
    for argument in arguments:
        result = app(result, argument)
    return result


def compose(f: Expression, g: Expression) -> Lambda:
    """Return ``x -> f(g(x))``."""
    return lam(["x"], app(f, app(g, ref("x"))))
