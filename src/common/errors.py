"""Exception hierarchy for DepDoc.

Library modules raise these; only the CLI entry point maps them to exit codes.
Discrepancies found by validation are returned as data and never raised.
"""

from __future__ import annotations

from typing import Optional


class DepDocError(Exception):
    """Base class for all DepDoc errors."""


class ConfigurationError(DepDocError):
    """Invalid configuration file or option value."""


class ManifestError(DepDocError):
    """Base class for manifest (DEPENDENCIES.md) errors."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path


class ManifestNotFoundError(ManifestError):
    """The manifest file does not exist."""


class ManifestReadError(ManifestError):
    """The manifest file exists but cannot be read or decoded."""


class ManifestWriteError(ManifestError):
    """The manifest file cannot be written."""


class ManifestFormatError(ManifestError):
    """A manifest line violates the grammar (strict parsing only)."""

    def __init__(self, message: str, line_number: int, path: Optional[str] = None):
        super().__init__(f"line {line_number}: {message}", path)
        self.line_number = line_number


class PackageManagerError(DepDocError):
    """A package manager's own metadata could not be used."""

    def __init__(self, message: str, manager: str, path: Optional[str] = None):
        super().__init__(message)
        self.manager = manager
        self.path = path


class MetadataNotFoundError(PackageManagerError):
    """A required metadata file (lockfile, package.json) is absent."""


class MetadataParseError(PackageManagerError):
    """A metadata file is unreadable or malformed."""
