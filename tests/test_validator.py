"""Tests for G-expression structural validation."""

import pytest

from errors import ValidationError, ValidationErrorKind
from gexpr import is_valid, suggest_fixes, validate, validate_package
from gexpr.model import (
    Application,
    Lambda,
    Literal,
    Reference,
    Vector,
    app,
    branch,
    encode,
    fix,
    lam,
    lit,
    match,
    ref,
    vec,
)


WELL_FORMED = [
    lit(42),
    lit("hello"),
    lit(None),
    lit([1, 2, 3]),
    ref("x"),
    ref("empty?"),
    vec([lit(1), ref("y"), 7]),
    app(ref("f")),
    app(lam(["x"], ref("x")), lit(42)),
    fix(lam(["f"], lam(["n"], app(ref("f"), ref("n"))))),
    match(ref("x"), [branch({"g": "lit", "v": 0}, lit("zero")), branch("else", lit("other"))]),
]


class TestValidateAcceptsWellFormed:
    """Well-formed inputs decode back to the same expression."""

    @pytest.mark.parametrize("expr", WELL_FORMED)
    def test_encode_then_validate_is_identity(self, expr):
        """Decoding the wire form yields an equal expression."""
        assert validate(encode(expr)) == expr

    def test_decodes_raw_application(self):
        """A raw application decodes into model objects."""
        result = validate({"g": "app", "v": {"fn": {"g": "ref", "v": "inc"}, "args": {"g": "lit", "v": 1}}})
        assert result == Application(Reference("inc"), Literal(1))

    def test_null_args_is_partial_application(self):
        """args: null is treated as absent."""
        result = validate({"g": "app", "v": {"fn": {"g": "ref", "v": "f"}, "args": None}})
        assert result.arguments is None

    def test_vector_keeps_untagged_elements_opaque(self):
        """Vector elements without a g key are kept as raw values."""
        result = validate({"g": "vec", "v": [{"g": "lit", "v": 1}, {"x": 1}, "s"]})
        assert result == Vector((Literal(1), {"x": 1}, "s"))

    def test_duplicate_lambda_params_are_allowed(self):
        """Duplicate parameter names are not rejected."""
        assert validate({"g": "lam", "v": {"params": ["x", "x"], "body": {"g": "ref", "v": "x"}}}) == Lambda(
            ("x", "x"), Reference("x")
        )

    def test_else_pattern_alias(self):
        """Both else spellings are accepted as catch-all patterns."""
        data = {
            "g": "match",
            "v": {
                "expr": {"g": "ref", "v": "x"},
                "branches": [{"pattern": "else_pattern", "result": {"g": "lit", "v": 1}}],
            },
        }
        assert is_valid(data)


class TestValidateRejects:
    """Malformed inputs raise ValidationError with the right kind."""

    def test_missing_tag(self):
        """A value without g fails with MISSING_TAG."""
        with pytest.raises(ValidationError) as exc:
            validate({"v": 1})
        assert exc.value.kind is ValidationErrorKind.MISSING_TAG

    def test_non_object_is_missing_tag(self):
        """Non-object input fails with MISSING_TAG."""
        with pytest.raises(ValidationError) as exc:
            validate([1, 2])
        assert exc.value.kind is ValidationErrorKind.MISSING_TAG

    def test_unknown_tag(self):
        """An unsupported g value fails with UNKNOWN_TAG."""
        with pytest.raises(ValidationError) as exc:
            validate({"g": "loop", "v": 1})
        assert exc.value.kind is ValidationErrorKind.UNKNOWN_TAG
        assert "loop" in exc.value.message

    def test_missing_v(self):
        """A known tag without v fails with MISSING_REQUIRED_FIELD."""
        with pytest.raises(ValidationError) as exc:
            validate({"g": "lit"})
        assert exc.value.kind is ValidationErrorKind.MISSING_REQUIRED_FIELD
        assert exc.value.field == "v"

    def test_literal_object_is_wrong_type(self):
        """Literal payloads cannot be objects."""
        with pytest.raises(ValidationError) as exc:
            validate({"g": "lit", "v": {"a": 1}})
        assert exc.value.kind is ValidationErrorKind.WRONG_FIELD_TYPE

    def test_reference_must_be_string(self):
        """Reference payloads must be strings."""
        with pytest.raises(ValidationError) as exc:
            validate({"g": "ref", "v": 3})
        assert exc.value.kind is ValidationErrorKind.WRONG_FIELD_TYPE
        assert exc.value.message == "Reference value must be a string"

    @pytest.mark.parametrize("name", ["", "1abc", "a-b", "a?b", "a??"])
    def test_reference_identifier(self, name):
        """Reference names must match the identifier pattern."""
        with pytest.raises(ValidationError) as exc:
            validate({"g": "ref", "v": name})
        assert exc.value.kind is ValidationErrorKind.INVALID_IDENTIFIER

    def test_lambda_param_with_question_mark(self):
        """Lambda params may not end with a question mark."""
        with pytest.raises(ValidationError) as exc:
            validate({"g": "lam", "v": {"params": ["ok?"], "body": {"g": "lit", "v": 1}}})
        assert exc.value.kind is ValidationErrorKind.INVALID_IDENTIFIER
        assert exc.value.value == "ok?"

    def test_lambda_missing_body(self):
        """Lambda requires both params and body."""
        with pytest.raises(ValidationError) as exc:
            validate({"g": "lam", "v": {"params": ["x"]}})
        assert exc.value.kind is ValidationErrorKind.MISSING_REQUIRED_FIELD
        assert exc.value.field == "body"

    def test_application_missing_fn(self):
        """Application requires fn."""
        with pytest.raises(ValidationError) as exc:
            validate({"g": "app", "v": {"args": {"g": "lit", "v": 1}}})
        assert exc.value.kind is ValidationErrorKind.MISSING_REQUIRED_FIELD
        assert exc.value.message == "Application must have 'fn' field"

    def test_vector_must_be_array(self):
        """Vector payloads must be arrays."""
        with pytest.raises(ValidationError) as exc:
            validate({"g": "vec", "v": "abc"})
        assert exc.value.kind is ValidationErrorKind.WRONG_FIELD_TYPE

    def test_match_invalid_pattern(self):
        """Match patterns must be objects or an else marker."""
        data = {
            "g": "match",
            "v": {"expr": {"g": "ref", "v": "x"}, "branches": [{"pattern": 3, "result": {"g": "lit", "v": 1}}]},
        }
        with pytest.raises(ValidationError) as exc:
            validate(data)
        assert exc.value.kind is ValidationErrorKind.WRONG_FIELD_TYPE


class TestNestedFailures:
    """Failures below the root are wrapped with their location."""

    def test_nested_failure_carries_path_and_cause(self):
        """A bad lambda body inside a fixpoint reports the full path."""
        data = {"g": "fix", "v": {"g": "lam", "v": {"params": ["x"], "body": {"g": "ref", "v": 5}}}}
        with pytest.raises(ValidationError) as exc:
            validate(data)
        err = exc.value
        assert err.kind is ValidationErrorKind.NESTED_INVALID
        assert err.path == "v.v.body"
        assert err.cause.kind is ValidationErrorKind.WRONG_FIELD_TYPE
        assert err.root_cause is err.cause
        assert "v.v.body" in err.message

    def test_vector_element_path(self):
        """Vector element failures are indexed."""
        with pytest.raises(ValidationError) as exc:
            validate({"g": "vec", "v": [{"g": "lit", "v": 1}, {"g": "bogus", "v": 1}]})
        assert exc.value.path == "v[1]"
        assert exc.value.cause.kind is ValidationErrorKind.UNKNOWN_TAG

    def test_to_dict_includes_cause(self):
        """Serialized nested errors include the innermost cause."""
        with pytest.raises(ValidationError) as exc:
            validate({"g": "app", "v": {"fn": {"v": 1}}})
        data = exc.value.to_dict()
        assert data["kind"] == "nested_invalid"
        assert data["path"] == "v.fn"
        assert data["cause"]["kind"] == "missing_tag"


class TestSuggestFixes:
    """Hints for invalid input."""

    def test_valid_has_no_suggestions(self):
        """Valid expressions need no fixes."""
        assert suggest_fixes({"g": "lit", "v": 1}) == []

    def test_missing_fields(self):
        """Missing g and v each produce a hint."""
        hints = suggest_fixes({})
        assert len(hints) == 2
        assert any("'g'" in h for h in hints)
        assert any("'v'" in h for h in hints)

    def test_nested_problem_is_located(self):
        """Nested problems report their path."""
        hints = suggest_fixes({"g": "fix", "v": {"g": "ref", "v": 1}})
        assert hints == ["Fix at v: Reference value must be a string"]


class TestValidatePackage:
    """Package documents are checked before their expression."""

    def test_valid_package(self):
        """A complete package document passes unchanged."""
        doc = {"name": "identity", "title": "Identity", "expression_data": encode(lam(["x"], ref("x")))}
        assert validate_package(doc) is doc

    @pytest.mark.parametrize("name", ["a", "Identity", "1st", "with-dash"])
    def test_bad_package_name(self, name):
        """Package names are lowercase identifiers of at least two characters."""
        doc = {"name": name, "title": "T", "expression_data": {"g": "lit", "v": 1}}
        with pytest.raises(ValidationError) as exc:
            validate_package(doc)
        assert exc.value.kind is ValidationErrorKind.INVALID_IDENTIFIER

    def test_missing_title(self):
        """Titles are required."""
        doc = {"name": "identity", "expression_data": {"g": "lit", "v": 1}}
        with pytest.raises(ValidationError) as exc:
            validate_package(doc)
        assert exc.value.field == "title"

    def test_bad_expression_data(self):
        """Invalid expression data is reported as such."""
        doc = {"name": "identity", "title": "T", "expression_data": {"v": 1}}
        with pytest.raises(ValidationError) as exc:
            validate_package(doc)
        assert exc.value.message.startswith("Invalid expression_data")

    def test_bare_expression(self):
        """Bare expressions are validated directly."""
        assert validate_package({"g": "ref", "v": "x"}) == {"g": "ref", "v": "x"}
