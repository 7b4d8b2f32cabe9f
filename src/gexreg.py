"""gexreg - G-expression validation, analysis and dependency resolution.

Command-line entrypoint. Each subcommand maps to one core operation; terminal
errors are logged and mapped to ``ExitCodes``.
"""

import json
import logging
import sys

import yaml

from args import parse_args
from cli_config import ConfigError, configure
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes
from errors import (
    IndexFormatError,
    IndexUnavailableError,
    PackageIndexError,
    ResolveError,
    ValidationError,
)
from gexpr import analyze, format_expression, suggest_fixes, validate, validate_package
from gexpr.examples import EXAMPLES
from gexpr.model import encode
from registry import HttpPackageIndex, load_index_file
from resolver import DependencyResolver

logger = logging.getLogger(__name__)


def load_document(path):
    """Load a JSON or YAML document from path."""
    with open(path, "r", encoding="utf-8") as fh:
        if path.lower().endswith(".json"):
            return json.load(fh)
        return yaml.safe_load(fh)


def build_lookup():
    """Return the package lookup selected by the current configuration."""
    if Constants.INDEX_FILE:
        return load_index_file(Constants.INDEX_FILE)
    return HttpPackageIndex(Constants.API_BASE_URL)


def emit(args, data, text):
    """Print data as JSON or text depending on the output format."""
    if args.OUTPUT_FORMAT == "json":
        print(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        print(text)


def _fail(args, code, error_data, message):
    logging.error(message)
    if args.OUTPUT_FORMAT == "json":
        print(json.dumps({"error": error_data}, indent=2, ensure_ascii=False))
    return code.value


def cmd_validate(args):
    """Validate an expression or package document."""
    document = load_document(args.FILE)
    validate_package(document)
    expr_data = document
    if isinstance(document, dict) and "expression_data" in document and "name" in document:
        expr_data = document["expression_data"]
    tag = expr_data["g"]
    emit(args, {"valid": True, "type": tag}, f"Valid G-expression ({tag})")
    return ExitCodes.SUCCESS.value


def cmd_analyze(args):
    """Print structural metrics of an expression."""
    analysis = analyze(load_document(args.FILE))
    text = "\n".join([
        f"Type:       {analysis.type}",
        f"Complexity: {analysis.complexity}",
        f"Depth:      {analysis.depth}",
        f"Structure:  {json.dumps(analysis.structure)}",
    ])
    emit(args, analysis.to_dict(), text)
    return ExitCodes.SUCCESS.value


def cmd_suggest(args):
    """Print fix suggestions for an expression."""
    suggestions = suggest_fixes(load_document(args.FILE))
    if not suggestions:
        emit(args, {"valid": True, "suggestions": []}, "G-expression is valid; nothing to fix")
        return ExitCodes.SUCCESS.value
    emit(
        args,
        {"valid": False, "suggestions": suggestions},
        "\n".join(f"- {s}" for s in suggestions),
    )
    return ExitCodes.VALIDATION_ERROR.value


def cmd_format(args):
    """Render an expression in the requested style."""
    expr = validate(load_document(args.FILE))
    rendered = format_expression(expr, args.STYLE)
    emit(args, {"style": args.STYLE, "output": rendered}, rendered)
    return ExitCodes.SUCCESS.value


def _resolved_text(resolved):
    return "\n".join(f"{name} {version}" for name, version in resolved.items())


def cmd_resolve(args):
    """Resolve a package into a flat version map."""
    resolved = DependencyResolver(build_lookup()).resolve(args.NAME)
    emit(args, {"resolved": resolved}, _resolved_text(resolved))
    return ExitCodes.SUCCESS.value


def cmd_check_deps(args):
    """Resolve a standalone requirement map."""
    requirements = load_document(args.FILE)
    if not isinstance(requirements, dict):
        raise IndexFormatError(f"{args.FILE} must contain a mapping of package name to requirement")
    resolved = DependencyResolver(build_lookup()).resolve_from_requirements(requirements)
    emit(args, {"resolved": resolved}, _resolved_text(resolved) or "No dependencies")
    return ExitCodes.SUCCESS.value


def cmd_tree(args):
    """Print the dependency tree of a package."""
    tree = DependencyResolver(build_lookup()).build_tree(args.NAME)
    emit(args, tree.to_dict(), tree.render())
    if tree.has_errors:
        return ExitCodes.RESOLUTION_ERROR.value
    return ExitCodes.SUCCESS.value


def cmd_dependents(args):
    """List packages that depend on a package (index files only)."""
    lookup = build_lookup()
    if not hasattr(lookup, "list_dependents"):
        return _fail(
            args,
            ExitCodes.FILE_ERROR,
            {"kind": "unsupported", "message": "dependents requires --index"},
            "The dependents command requires a package index file (--index)",
        )
    dependents = lookup.list_dependents(args.NAME)
    text = "\n".join(
        f"{d['name']} ({d['version_requirement']})" for d in dependents
    ) or f"No packages depend on {args.NAME}"
    emit(args, {"dependents": dependents}, text)
    return ExitCodes.SUCCESS.value


def cmd_examples(args):
    """Print the built-in example expressions."""
    data = [
        {"name": name, "description": description, "expression": encode(expr)}
        for name, description, expr in EXAMPLES
    ]
    lines = []
    for idx, (name, description, expr) in enumerate(EXAMPLES, 1):
        lines.append(f"{idx}. {name}")
        lines.append(f"   {description}")
        lines.append(f"   {format_expression(expr, 'compact')}")
    emit(args, data, "\n".join(lines))
    return ExitCodes.SUCCESS.value


COMMANDS = {
    "validate": cmd_validate,
    "analyze": cmd_analyze,
    "suggest": cmd_suggest,
    "format": cmd_format,
    "resolve": cmd_resolve,
    "tree": cmd_tree,
    "check-deps": cmd_check_deps,
    "dependents": cmd_dependents,
    "examples": cmd_examples,
}


def run(args):
    """Run the selected subcommand and return its exit code."""
    handler = COMMANDS[args.COMMAND]
    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.COMMAND),
        )
    try:
        return handler(args)
    except ValidationError as err:
        return _fail(args, ExitCodes.VALIDATION_ERROR, err.to_dict(), err.message)
    except ResolveError as err:
        return _fail(args, ExitCodes.RESOLUTION_ERROR, err.to_dict(), err.message)
    except IndexUnavailableError as err:
        return _fail(args, ExitCodes.CONNECTION_ERROR, {"kind": "connection", "message": str(err)}, str(err))
    except (PackageIndexError, OSError, json.JSONDecodeError, yaml.YAMLError) as err:
        return _fail(args, ExitCodes.FILE_ERROR, {"kind": "file", "message": str(err)}, str(err))


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    configure_logging(args.LOG_LEVEL, args.LOG_FILE)
    try:
        configure(args)
    except ConfigError as err:
        logging.error(str(err))
        sys.exit(ExitCodes.FILE_ERROR.value)
    logging.info("Arguments parsed.")
    sys.exit(run(args))


if __name__ == "__main__":
    main()
