"""Tests for structural analysis of G-expressions."""

import pytest

from errors import ValidationError, ValidationErrorKind
from gexpr import analyze
from gexpr.analyzer import complexity, depth
from gexpr.model import app, branch, encode, fix, lam, lit, match, ref, vec


class TestAnalyze:
    """analyze() reports type, structure, complexity and depth."""

    def test_literal(self):
        """A literal is one node deep."""
        result = analyze(lit(42))
        assert result.type == "lit"
        assert result.depth == 1
        assert result.complexity == 1
        assert result.structure == {"type": "literal", "value_type": "number"}

    def test_applied_identity(self):
        """Applying identity to a literal has depth 3 and four nodes."""
        result = analyze(app(lam(["x"], ref("x")), lit(42)))
        assert result.depth == 3
        assert result.complexity == 4
        assert result.structure["type"] == "application"
        assert result.structure["function"] == {"type": "lambda", "arity": 1, "params": ["x"]}

    def test_raw_json_input(self):
        """Raw JSON is validated then analyzed."""
        result = analyze({"g": "ref", "v": "x"})
        assert result.to_dict() == {
            "type": "ref",
            "structure": {"type": "reference", "name": "x"},
            "complexity": 1,
            "depth": 1,
        }

    def test_invalid_input_raises(self):
        """Invalid input surfaces the validator error."""
        with pytest.raises(ValidationError) as exc:
            analyze({"g": "nope", "v": 1})
        assert exc.value.kind is ValidationErrorKind.UNKNOWN_TAG

    def test_vector_counts_only_expressions(self):
        """Opaque vector elements add nothing."""
        result = analyze(vec([lit(1), 2, ref("x")]))
        assert result.complexity == 3
        assert result.depth == 2
        assert result.structure["length"] == 3
        assert result.structure["elements"][1] == {"type": "literal", "value": 2}

    def test_empty_vector(self):
        """An empty vector is a single node."""
        result = analyze(vec([]))
        assert result.complexity == 1
        assert result.depth == 1

    def test_partial_application(self):
        """Partial application has no args structure."""
        result = analyze(app(ref("f")))
        assert result.structure["args"] is None
        assert result.complexity == 2

    def test_match(self):
        """Match counts scrutinee and every branch result."""
        expr = match(ref("x"), [branch({"g": "lit", "v": 1}, lit("one")), branch("else", lit("other"))])
        result = analyze(expr)
        assert result.complexity == 4
        assert result.depth == 2
        assert result.structure["branches"] == 2

    def test_fixpoint_structure(self):
        """Fixpoint structure nests its inner expression."""
        result = analyze(encode(fix(lam(["f"], ref("f")))))
        assert result.structure == {
            "type": "fixpoint",
            "expr": {"type": "lambda", "arity": 1, "params": ["f"]},
        }
        assert result.depth == 3


class TestMetrics:
    """complexity and depth on their own."""

    def test_non_expression_scores_zero(self):
        """Opaque values score zero."""
        assert complexity({"x": 1}) == 0
        assert depth(5) == 0

    def test_nested_lambdas(self):
        """Each lambda adds one level."""
        expr = lam(["a"], lam(["b"], lam(["c"], ref("c"))))
        assert depth(expr) == 4
        assert complexity(expr) == 4
