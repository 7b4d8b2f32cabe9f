"""Human-readable renderings of G-expressions."""

from __future__ import annotations

import json
from typing import Any

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


def format_expression(expr: Expression, style: str = "pretty") -> str:
    """Render expr as ``pretty`` call notation, indented ``json`` or ``compact`` JSON."""
    if style == "compact":
        return json.dumps(encode(expr), separators=(",", ":"))
    if style == "pretty":
        return _pretty(expr)
    return json.dumps(encode(expr), indent=2)


def _pretty_item(value: Any) -> str:
    if is_expression(value):
        return _pretty(value)
    return json.dumps(value)


def _pretty(expr: Expression) -> str:
    if isinstance(expr, Literal):
        return f"lit({json.dumps(expr.value)})"
    if isinstance(expr, Reference):
        return f"ref({expr.name})"
    if isinstance(expr, Vector):
        return f"vec([{', '.join(_pretty_item(i) for i in expr.items)}])"
    if isinstance(expr, Application):
        if expr.arguments is None:
            return f"app({_pretty(expr.function)})"
        return f"app({_pretty(expr.function)}, {_pretty(expr.arguments)})"
    if isinstance(expr, Lambda):
        return f"lam([{', '.join(expr.params)}], {_pretty(expr.body)})"
    if isinstance(expr, Fixpoint):
        return f"fix({_pretty(expr.inner)})"
    if isinstance(expr, Match):
        return f"match({_pretty(expr.scrutinee)}, {len(expr.branches)} branches)"
    raise TypeError(f"Not a G-expression: {expr!r}")
