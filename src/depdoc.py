"""DepDoc - document and validate the installed dependencies of a project.

Returns:
    int: Exit code
"""

import json
import logging
import os
import sys

from args import parse_args
from cli_config import load_config, resolve_settings
from common.errors import (
    ConfigurationError,
    ManifestError,
    ManifestNotFoundError,
    PackageManagerError,
)
from common.logging_utils import Timer, add_file_handler, configure_logging, extra_context, is_debug_enabled
from constants import ExitCodes
from inventory.models import PackageInventory
from manifest.parser import parse, parse_file, read_manifest
from manifest.writer import render_manifest, write_manifest
from package_managers import collect_installed
from validator.compare import compare
from validator.results import DiscrepancyKind
from validator.strict_mode import StrictMode

logger = logging.getLogger(__name__)


def setup_logging(args):
    """Configure logging from CLI arguments."""
    configure_logging(getattr(args, "LOG_LEVEL", None))
    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        add_file_handler(log_file)
        logger.info("Logging to file: %s", log_file)


def print_results(results, output_format="text"):
    """Print discrepancies to stdout, one line each or as a JSON array."""
    if output_format == "json":
        print(json.dumps([r.to_dict() for r in results], indent=2))
        return
    for result in results:
        print(result.render())


def run_validate(settings, output_format="text"):
    """Validate the manifest against installed packages.

    Returns:
        int: Exit code value.
    """
    if not os.path.isfile(settings.manifest_path):
        raise ManifestNotFoundError(f"Missing dependency file in: {settings.manifest_path}", settings.manifest_path)

    # Everything that can fail on I/O runs before the comparison.
    installed = collect_installed(settings.directory, settings.managers)
    documented = parse_file(settings.manifest_path, strict=settings.strict_parse)
    if settings.managers is not None:
        documented = PackageInventory(p for p in documented if p.manager in settings.managers)

    with Timer() as timer:
        results = compare(settings.strict_mode, installed, documented)
    if is_debug_enabled(logger):
        logger.debug(
            "Validation finished",
            extra=extra_context(event="function_exit", component="cli", action="validate",
                                count=len(results), duration_ms=round(timer.duration_ms, 3)),
        )

    if not results:
        if output_format == "json":
            print_results(results, output_format)
        elif settings.verbose:
            print("Validation result: empty, all fine.")
        return ExitCodes.SUCCESS.value

    logger.error("Validation result: found %d error(s)", len(results))
    print_results(results, output_format)
    return ExitCodes.VALIDATION_FAILED.value


def run_update(settings):
    """Regenerate the manifest from installed packages, keeping annotations.

    Returns:
        int: Exit code value.
    """
    installed = collect_installed(settings.directory, settings.managers)

    previous_text = None
    documented = PackageInventory()
    if os.path.isfile(settings.manifest_path):
        previous_text = read_manifest(settings.manifest_path)
        documented = parse(previous_text)
    else:
        logger.info("Creating %s", settings.manifest_path)

    for change in compare(StrictMode(), installed, documented):
        if change.kind is DiscrepancyKind.UNSUPPORTED_MANAGER:
            logger.info("Keeping section as written: %s", change.render())
            continue
        logger.info("Updating: %s", change.render())

    text = render_manifest(installed, documented, previous_text, newline=settings.newline)
    if text == previous_text:
        if settings.verbose:
            print(f"{settings.manifest_path} is up to date.")
        return ExitCodes.SUCCESS.value

    write_manifest(settings.manifest_path, text)
    if settings.verbose:
        print(f"Updated {settings.manifest_path} ({len(installed)} package(s)).")
    return ExitCodes.SUCCESS.value


def main(argv=None):
    """Main function of the program."""
    args = parse_args(argv)
    setup_logging(args)
    logger.info("Arguments parsed.")

    try:
        directory = os.path.abspath(args.DIRECTORY or os.getcwd())
        settings = resolve_settings(args, load_config(args.CONFIG, directory))
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return ExitCodes.CONFIG_ERROR.value

    try:
        if args.action == "validate":
            return run_validate(settings, getattr(args, "OUTPUT_FORMAT", "text"))
        return run_update(settings)
    except ManifestError as e:
        logger.error("%s", e)
        return ExitCodes.FILE_ERROR.value
    except PackageManagerError as e:
        logger.error("%s", e)
        return ExitCodes.PACKAGE_MANAGER_ERROR.value
    except ConfigurationError as e:
        logger.error("Configuration error: %s", e)
        return ExitCodes.CONFIG_ERROR.value


if __name__ == "__main__":
    sys.exit(main())
