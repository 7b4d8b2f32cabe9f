"""Argument parsing functionality for gexreg."""

import argparse
from constants import Constants


def _add_index_options(parser):
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--index",
                        dest="INDEX_FILE",
                        help="Package index file (YAML or JSON)",
                        action="store",
                        type=str)
    source.add_argument("--api",
                        dest="API_URL",
                        help=f"Registry API base URL (default: {Constants.API_BASE_URL})",
                        action="store",
                        type=str)
    parser.add_argument("--timeout",
                        dest="REQUEST_TIMEOUT",
                        help="HTTP request timeout in seconds",
                        action="store",
                        type=int)


def build_parser():
    """Build the gexreg argument parser."""
    parser = argparse.ArgumentParser(
        prog="gexreg",
        description="gexreg - G-expression validation, analysis and dependency resolution",
        add_help=True,
    )

    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=Constants.LOG_LEVELS,
                        default="WARNING")
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("-o", "--output-format",
                        dest="OUTPUT_FORMAT",
                        help="Output format (json or text)",
                        action="store",
                        type=str.lower,
                        choices=Constants.OUTPUT_FORMATS,
                        default="text")

    sub = parser.add_subparsers(dest="COMMAND", metavar="COMMAND")
    sub.required = True

    for name, text in (
        ("validate", "Validate a G-expression or package document"),
        ("analyze", "Report type, structure, complexity and depth of a G-expression"),
        ("suggest", "Suggest fixes for an invalid G-expression"),
    ):
        cmd = sub.add_parser(name, help=text)
        cmd.add_argument("FILE", help="JSON or YAML file holding the expression")

    fmt = sub.add_parser("format", help="Render a G-expression")
    fmt.add_argument("FILE", help="JSON or YAML file holding the expression")
    fmt.add_argument("--style",
                     dest="STYLE",
                     help="Rendering style",
                     action="store",
                     type=str.lower,
                     choices=Constants.EXPRESSION_STYLES,
                     default="pretty")

    for name, text in (
        ("resolve", "Resolve a package and its transitive dependencies"),
        ("tree", "Show the dependency tree of a package"),
        ("dependents", "List packages depending on a package"),
    ):
        cmd = sub.add_parser(name, help=text)
        cmd.add_argument("NAME", help="Package name")
        _add_index_options(cmd)

    check = sub.add_parser("check-deps", help="Resolve a requirement map (name -> requirement)")
    check.add_argument("FILE", help="JSON or YAML file holding the requirement map")
    _add_index_options(check)

    sub.add_parser("examples", help="Show example G-expressions")

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
