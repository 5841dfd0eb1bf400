"""Argument parsing functionality for DepDoc."""

import argparse

from constants import Constants


def _add_common_options(parser):
    parser.add_argument("-d", "--directory",
                        dest="DIRECTORY",
                        help="Target directory containing DEPENDENCIES.md (default: current directory)",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("-m", "--manager",
                        dest="MANAGERS",
                        help="Restrict to a package manager (can be used multiple times)",
                        action="append",
                        type=str.lower,
                        choices=Constants.SUPPORTED_PACKAGES)
    parser.add_argument("-v", "--verbose",
                        dest="VERBOSE",
                        help="Print a confirmation when there is nothing to report.",
                        action="store_true")
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level (default: $DEPDOC_LOG_LEVEL, else WARNING)",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default=None)
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="depdoc",
        description="DepDoc - Document and validate installed dependencies",
        add_help=True,
    )
    subparsers = parser.add_subparsers(dest="action", required=True)

    validate = subparsers.add_parser(
        "validate", help="Validate an already generated DEPENDENCIES.md"
    )
    _add_common_options(validate)
    validate.add_argument("--no-strict-missing",
                          dest="NO_STRICT_MISSING",
                          help="Do not report documented packages that are not installed.",
                          action="store_true")
    validate.add_argument("--no-strict-extra",
                          dest="NO_STRICT_EXTRA",
                          help="Do not report installed packages that are not documented.",
                          action="store_true")
    validate.add_argument("--no-strict-version",
                          dest="NO_STRICT_VERSION",
                          help="Do not report version mismatches.",
                          action="store_true")
    validate.add_argument("--strict-parse",
                          dest="STRICT_PARSE",
                          help="Fail on duplicate or malformed package lines in the manifest.",
                          action="store_true")
    validate.add_argument("-f", "--format",
                          dest="OUTPUT_FORMAT",
                          help="Output format for discrepancies (default: text)",
                          action="store",
                          type=str.lower,
                          choices=["text", "json"],
                          default="text")

    update = subparsers.add_parser(
        "update", help="Update or create a DEPENDENCIES.md"
    )
    _add_common_options(update)

    return parser.parse_args(argv)
