"""Project configuration loading and CLI override merging.

Configuration comes from an explicit ``--config`` path or from the first of
``.depdoc.yml``, ``.depdoc.yaml`` or ``.depdoc.json`` in the target directory.
CLI flags are applied on top with the highest precedence.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

import yaml

from common.errors import ConfigurationError
from constants import Constants
from validator.strict_mode import StrictMode

logger = logging.getLogger(__name__)

_KNOWN_KEYS = {"strict_mode", "strict_parse", "managers", "newline", "filename"}


@dataclass(frozen=True)
class Settings:
    """Effective settings for one command run."""

    directory: str
    manifest_path: str
    strict_mode: StrictMode
    strict_parse: bool = False
    managers: Optional[Tuple[str, ...]] = None
    newline: str = "\n"
    verbose: bool = False


def find_config_file(directory: str) -> Optional[str]:
    for name in Constants.CONFIG_FILES:
        path = os.path.join(directory, name)
        if os.path.isfile(path):
            return path
    return None


def load_config(config_path: Optional[str], directory: str) -> Dict[str, Any]:
    """Load the configuration mapping.

    Args:
        config_path: Explicit config path; must exist when given.
        directory: Target directory searched for a default config file.

    Returns:
        The configuration dict, empty when no file is found.

    Raises:
        ConfigurationError: If the file is missing (explicit path), unreadable,
            malformed or has unknown keys.
    """
    if config_path:
        if not os.path.isfile(config_path):
            raise ConfigurationError(f"Config file not found: {config_path}")
        path = config_path
    else:
        path = find_config_file(directory)
        if path is None:
            return {}

    try:
        with open(path, "r", encoding="utf-8") as fh:
            if path.lower().endswith(".json"):
                data = json.load(fh)
            else:
                data = yaml.safe_load(fh)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Cannot read config file {path}: {e}") from e
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ConfigurationError(f"Invalid config file {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    unknown = set(data) - _KNOWN_KEYS
    if unknown:
        raise ConfigurationError(f"Unknown config option(s) in {path}: {', '.join(sorted(unknown))}")
    logger.info("Loaded configuration from: %s", path)
    return data


def _strict_mode(args, config: Dict[str, Any]) -> StrictMode:
    base = StrictMode.from_config(config.get("strict_mode"))
    return StrictMode(
        version_mismatch=base.version_mismatch and not getattr(args, "NO_STRICT_VERSION", False),
        missing=base.missing and not getattr(args, "NO_STRICT_MISSING", False),
        extra=base.extra and not getattr(args, "NO_STRICT_EXTRA", False),
    )


def _managers(args, config: Dict[str, Any]) -> Optional[Tuple[str, ...]]:
    selected = getattr(args, "MANAGERS", None) or config.get("managers")
    if selected is None:
        return None
    if isinstance(selected, str) or not all(isinstance(m, str) for m in selected):
        raise ConfigurationError("managers must be a list of names")
    unknown = [m for m in selected if m.lower() not in Constants.SUPPORTED_PACKAGES]
    if unknown:
        raise ConfigurationError(f"Unsupported package manager(s): {', '.join(unknown)}")
    return tuple(dict.fromkeys(m.lower() for m in selected))


def resolve_settings(args, config: Dict[str, Any]) -> Settings:
    """Merge config file values with CLI arguments (CLI wins)."""
    directory = os.path.abspath(getattr(args, "DIRECTORY", None) or os.getcwd())
    filename = config.get("filename") or Constants.DEPENDENCIES_FILE
    if not isinstance(filename, str):
        raise ConfigurationError("filename must be a string")

    newline = config.get("newline", "\n")
    if not isinstance(newline, str):
        raise ConfigurationError("newline must be one of: lf, crlf")
    if newline in Constants.NEWLINES.values():
        newline = {v: k for k, v in Constants.NEWLINES.items()}[newline]
    if newline not in Constants.NEWLINES:
        raise ConfigurationError("newline must be one of: lf, crlf")

    strict_parse = config.get("strict_parse", False)
    if not isinstance(strict_parse, bool):
        raise ConfigurationError("strict_parse must be true or false")

    return Settings(
        directory=directory,
        manifest_path=os.path.join(directory, filename),
        strict_mode=_strict_mode(args, config),
        strict_parse=strict_parse or bool(getattr(args, "STRICT_PARSE", False)),
        managers=_managers(args, config),
        newline=newline,
        verbose=bool(getattr(args, "VERBOSE", False)),
    )
