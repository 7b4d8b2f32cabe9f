"""Structural validation of JSON G-expressions.

``validate`` decodes an untyped JSON value into the expression model, raising
``ValidationError`` on the first structural problem. It never evaluates the
expression.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List

from constants import Constants, ExpressionTags
from errors import ValidationError, ValidationErrorKind as Kind

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
    is_tagged,
)

_REFERENCE_RE = re.compile(Constants.REFERENCE_PATTERN)
_PARAM_RE = re.compile(Constants.PARAM_PATTERN)
_PACKAGE_NAME_RE = re.compile(Constants.PACKAGE_NAME_PATTERN)

_FORM_NAMES = {
    ExpressionTags.LITERAL.value: "Literal",
    ExpressionTags.REFERENCE.value: "Reference",
    ExpressionTags.APPLICATION.value: "Application",
    ExpressionTags.VECTOR.value: "Vector",
    ExpressionTags.LAMBDA.value: "Lambda",
    ExpressionTags.FIXPOINT.value: "Fixpoint",
    ExpressionTags.MATCH.value: "Match",
}


def validate(value: Any) -> Expression:
    """Validate a JSON-like value and return the decoded expression.

    Args:
        value: Any JSON-compatible value (usually a parsed dict).

    Returns:
        The expression model equivalent of value.

    Raises:
        ValidationError: On the first structural problem. Failures below the
            root are reported as NESTED_INVALID with the innermost error as
            ``cause``.
    """
    try:
        return _decode(value, "")
    except ValidationError as err:
        if not err.path:
            raise
        raise ValidationError(
            Kind.NESTED_INVALID,
            f"Invalid G-expression at {err.path}: {err.message}",
            path=err.path,
            cause=err.at(""),
        ) from err


def is_valid(value: Any) -> bool:
    """Return True if value is a well-formed G-expression."""
    try:
        validate(value)
    except ValidationError:
        return False
    return True


def _child(path: str, suffix: str) -> str:
    return f"{path}.{suffix}" if path else suffix


def _decode(value: Any, path: str) -> Expression:
    if not isinstance(value, dict):
        raise ValidationError(
            Kind.MISSING_TAG,
            "G-expression must be a JSON object with 'g' and 'v' fields",
            path=path,
        )
    if "g" not in value:
        raise ValidationError(
            Kind.MISSING_TAG, "G-expression missing required 'g' field", path=path
        )
    tag = value["g"]
    if not isinstance(tag, str) or tag not in Constants.VALID_TAGS:
        raise ValidationError(
            Kind.UNKNOWN_TAG,
            f"Invalid g-expression type: '{tag}'. Valid types are: {', '.join(Constants.VALID_TAGS)}",
            form=tag if isinstance(tag, str) else None,
            field="g",
            path=path,
        )
    if "v" not in value:
        raise ValidationError(
            Kind.MISSING_REQUIRED_FIELD,
            f"{_FORM_NAMES[tag]} expression missing required 'v' field",
            form=tag,
            field="v",
            path=path,
        )
    payload = value["v"]
    vpath = _child(path, "v")

    if tag == ExpressionTags.LITERAL.value:
        return _decode_literal(payload, path)
    if tag == ExpressionTags.REFERENCE.value:
        return _decode_reference(payload, path)
    if tag == ExpressionTags.VECTOR.value:
        return _decode_vector(payload, path, vpath)
    if tag == ExpressionTags.APPLICATION.value:
        return _decode_application(payload, path, vpath)
    if tag == ExpressionTags.LAMBDA.value:
        return _decode_lambda(payload, path, vpath)
    if tag == ExpressionTags.FIXPOINT.value:
        return Fixpoint(_decode(payload, vpath))
    return _decode_match(payload, path, vpath)


def _wrong_type(form: str, field: str, message: str, path: str) -> ValidationError:
    return ValidationError(Kind.WRONG_FIELD_TYPE, message, form=form, field=field, path=path)


def _missing(form: str, field: str, message: str, path: str) -> ValidationError:
    return ValidationError(Kind.MISSING_REQUIRED_FIELD, message, form=form, field=field, path=path)


def _decode_literal(payload: Any, path: str) -> Literal:
    if payload is None or isinstance(payload, (bool, int, float, str, list)):
        return Literal(payload)
    raise _wrong_type(
        "lit", "v", "Literal value must be a number, string, boolean, null, or array", path
    )


def _decode_reference(payload: Any, path: str) -> Reference:
    if not isinstance(payload, str):
        raise _wrong_type("ref", "v", "Reference value must be a string", path)
    if not _REFERENCE_RE.fullmatch(payload):
        raise ValidationError(
            Kind.INVALID_IDENTIFIER,
            f"Reference '{payload}' must be a valid identifier",
            form="ref",
            field="v",
            value=payload,
            path=path,
        )
    return Reference(payload)


def _decode_vector(payload: Any, path: str, vpath: str) -> Vector:
    if not isinstance(payload, list):
        raise _wrong_type("vec", "v", "Vector value must be an array", path)
    items = []
    for idx, item in enumerate(payload):
        if is_tagged(item):
            items.append(_decode(item, f"{vpath}[{idx}]"))
        else:
            items.append(item)
    return Vector(tuple(items))


def _decode_application(payload: Any, path: str, vpath: str) -> Application:
    if not isinstance(payload, dict):
        raise _wrong_type("app", "v", "Application value must be an object with 'fn' field", path)
    if "fn" not in payload:
        raise _missing("app", "fn", "Application must have 'fn' field", path)
    function = _decode(payload["fn"], _child(vpath, "fn"))
    arguments = None
    if payload.get("args") is not None:
        arguments = _decode(payload["args"], _child(vpath, "args"))
    return Application(function, arguments)


def _decode_lambda(payload: Any, path: str, vpath: str) -> Lambda:
    if not isinstance(payload, dict) or "params" not in payload or "body" not in payload:
        field = "params" if not isinstance(payload, dict) or "params" not in payload else "body"
        raise _missing("lam", field, "Lambda must have 'params' (array) and 'body' fields", path)
    params = payload["params"]
    if not isinstance(params, list):
        raise _wrong_type("lam", "params", "Lambda must have 'params' (array) and 'body' fields", path)
    for param in params:
        if not isinstance(param, str):
            raise _wrong_type("lam", "params", f"Parameter must be a string, got: {param!r}", path)
        if not _PARAM_RE.fullmatch(param):
            raise ValidationError(
                Kind.INVALID_IDENTIFIER,
                f"Parameter '{param}' must be a valid identifier",
                form="lam",
                field="params",
                value=param,
                path=path,
            )
    body = _decode(payload["body"], _child(vpath, "body"))
    return Lambda(tuple(params), body)


def _decode_match(payload: Any, path: str, vpath: str) -> Match:
    if not isinstance(payload, dict) or "expr" not in payload or "branches" not in payload:
        field = "expr" if not isinstance(payload, dict) or "expr" not in payload else "branches"
        raise _missing("match", field, "Match must have 'expr' and 'branches' fields", path)
    branches_raw = payload["branches"]
    if not isinstance(branches_raw, list):
        raise _wrong_type("match", "branches", "Match branches must be an array", path)
    scrutinee = _decode(payload["expr"], _child(vpath, "expr"))
    branches = []
    for idx, raw in enumerate(branches_raw):
        bpath = _child(vpath, f"branches[{idx}]")
        if not isinstance(raw, dict) or "pattern" not in raw or "result" not in raw:
            raise _missing(
                "match", "branches", f"Branch {idx} must have 'pattern' and 'result' fields", path
            )
        pattern = raw["pattern"]
        if not (isinstance(pattern, dict) or pattern in Constants.ELSE_PATTERNS):
            raise _wrong_type("match", "pattern", f"Branch {idx} has an invalid pattern format", path)
        branches.append(Branch(pattern, _decode(raw["result"], _child(bpath, "result"))))
    return Match(scrutinee, tuple(branches))


def suggest_fixes(value: Any) -> List[str]:
    """Return hints for fixing an invalid G-expression (empty when valid)."""
    if is_valid(value):
        return []
    suggestions = []
    if not isinstance(value, dict):
        return ["G-expression must be a JSON object"]
    if "g" not in value:
        suggestions.append(
            "Add a 'g' field specifying the expression type "
            f"({', '.join(Constants.VALID_TAGS)})"
        )
    elif not isinstance(value["g"], str):
        suggestions.append("The 'g' field must be a string")
    elif value["g"] not in Constants.VALID_TAGS:
        suggestions.append(
            f"Unknown type '{value['g']}'; use one of: {', '.join(Constants.VALID_TAGS)}"
        )
    if "v" not in value:
        suggestions.append("Add a 'v' field containing the expression value")
    if not suggestions:
        try:
            validate(value)
        except ValidationError as err:
            cause = err.root_cause
            location = f" at {err.path}" if err.path else ""
            suggestions.append(f"Fix{location}: {cause.message}")
    return suggestions


def validate_package(payload: Any) -> Dict[str, Any]:
    """Validate a publishable package document or a bare expression.

    Documents carrying ``name``, ``title`` and ``expression_data`` are checked
    for a well-formed package name and title; any other value is validated as
    a bare G-expression. The payload is returned unchanged on success.
    """
    if isinstance(payload, dict) and "expression_data" in payload and "name" in payload:
        name = payload.get("name")
        if not isinstance(name, str) or not _PACKAGE_NAME_RE.fullmatch(name) or not (
            Constants.PACKAGE_NAME_MIN_LENGTH <= len(name) <= Constants.PACKAGE_NAME_MAX_LENGTH
        ):
            raise ValidationError(
                Kind.INVALID_IDENTIFIER,
                f"Package name {name!r} must start with a letter and contain only lowercase "
                "letters, numbers, and underscores",
                field="name",
                value=name,
            )
        title = payload.get("title")
        if not isinstance(title, str) or not title.strip():
            raise ValidationError(
                Kind.MISSING_REQUIRED_FIELD, "Package must have a non-empty 'title'", field="title"
            )
        try:
            validate(payload["expression_data"])
        except ValidationError as err:
            raise ValidationError(
                err.kind,
                f"Invalid expression_data: {err.message}",
                form=err.form,
                field=err.field,
                value=err.value,
                path=err.path,
                cause=err.cause,
            ) from err
        return payload
    validate(payload)
    return payload
