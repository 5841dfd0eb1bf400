"""Parser for the DEPENDENCIES.md manifest.

The manifest is markdown-like text::

    # composer
    - symfony/console: v5.4.0

    ## dev
    - phpunit/phpunit: 9.5.10

A level-1 heading opens a manager section, a level-2 heading inside it opens a
group, and ``- name: version`` lines are packages. Everything else is prose and
is ignored, so hand-edited notes never break parsing.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, List, Optional

from common.errors import ManifestFormatError, ManifestNotFoundError, ManifestReadError
from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from inventory.models import Package, PackageInventory

logger = logging.getLogger(__name__)

_HEADING_RE = re.compile(r"^(#{1,6})\s+(.*?)\s*#*\s*$")
_MANAGER_TOKEN_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")
_LIST_ITEM_RE = re.compile(r"^-\s")
_ITEM_RE = re.compile(r"^-\s+(?P<name>[^:]*):(?P<version>.*)$")


class LineKind(Enum):
    """Classification of a single manifest line."""

    MANAGER = "manager"
    GROUP = "group"
    ITEM = "item"
    FREEFORM = "freeform"
    PROSE = "prose"
    BLANK = "blank"


@dataclass(frozen=True)
class ManifestLine:
    """A classified manifest line with the section context it appeared in."""

    number: int
    kind: LineKind
    raw: str
    manager: Optional[str] = None
    group: Optional[str] = None
    name: Optional[str] = None
    version: Optional[str] = None
    malformed_item: bool = False


def normalize_manager(heading: str) -> Optional[str]:
    """Return the manager name for a level-1 heading, or None for prose headings.

    Supported managers match case-insensitively. Other single-token headings
    are kept under their lower-cased name so validation can flag them.
    """
    text = heading.strip()
    if not _MANAGER_TOKEN_RE.match(text):
        return None
    lowered = text.lower()
    for supported in Constants.SUPPORTED_PACKAGES:
        if lowered == supported:
            return supported
    return lowered


def _split_item(line: str):
    match = _ITEM_RE.match(line.rstrip())
    if match is None:
        return None
    return match.group("name").strip(), match.group("version").strip()


def iter_manifest(text: str) -> Iterator[ManifestLine]:
    """Classify every line of ``text`` in order.

    Items outside a manager section are reported as prose; they belong to no
    manager. ``malformed_item`` marks list-item shaped lines inside a manager
    section that do not match ``- name: version``.
    """
    manager: Optional[str] = None
    group: Optional[str] = None
    for number, raw in enumerate(text.splitlines(), start=1):
        if not raw.strip():
            yield ManifestLine(number, LineKind.BLANK, raw, manager, group)
            continue

        heading = _HEADING_RE.match(raw)
        if heading:
            level, title = len(heading.group(1)), heading.group(2)
            if level == 1:
                manager, group = normalize_manager(title), None
                kind = LineKind.MANAGER if manager else LineKind.FREEFORM
                yield ManifestLine(number, kind, raw, manager, group)
                continue
            if level == 2 and manager is not None and title:
                group = title
                yield ManifestLine(number, LineKind.GROUP, raw, manager, group)
                continue
            yield ManifestLine(number, LineKind.PROSE, raw, manager, group)
            continue

        if manager is not None and _LIST_ITEM_RE.match(raw):
            parts = _split_item(raw)
            if parts and parts[0] and parts[1]:
                name, version = parts
                yield ManifestLine(number, LineKind.ITEM, raw, manager, group, name, version)
                continue
            yield ManifestLine(number, LineKind.PROSE, raw, manager, group, malformed_item=True)
            continue

        yield ManifestLine(number, LineKind.PROSE, raw, manager, group)


def parse(text: str, strict: bool = False) -> PackageInventory:
    """Parse manifest text into a PackageInventory in source order.

    Args:
        text: Manifest contents.
        strict: Raise ManifestFormatError on duplicate keys and malformed
            list items instead of skipping them.

    Returns:
        PackageInventory of the documented packages.
    """
    packages: List[Package] = []
    seen = {}
    skipped = 0
    for line in iter_manifest(text):
        if line.malformed_item:
            if strict:
                raise ManifestFormatError(f"malformed package line: {line.raw.strip()!r}", line.number)
            skipped += 1
            continue
        if line.kind is not LineKind.ITEM:
            continue
        package = Package(manager=line.manager, name=line.name, version=line.version, group=line.group)
        if package.key in seen:
            if strict:
                raise ManifestFormatError(
                    f"duplicate package {package.name!r} (first seen on line {seen[package.key]})",
                    line.number,
                )
            logger.debug("Duplicate entry for %s on line %d, keeping the later one", package.name, line.number)
        seen.setdefault(package.key, line.number)
        packages.append(package)

    inventory = PackageInventory(packages)
    if is_debug_enabled(logger):
        logger.debug(
            "Parsed manifest",
            extra=extra_context(
                event="parse", component="manifest", action="parse",
                count=len(inventory), skipped=skipped or None,
            ),
        )
    return inventory


def read_manifest(path: str) -> str:
    """Read a manifest file as UTF-8 text.

    Raises:
        ManifestNotFoundError: If ``path`` does not exist.
        ManifestReadError: If the file cannot be read or decoded.
    """
    try:
        with open(path, "r", encoding="utf-8", newline="") as fh:
            return fh.read()
    except FileNotFoundError as e:
        raise ManifestNotFoundError(f"Missing dependency file in: {path}", path) from e
    except (OSError, UnicodeDecodeError) as e:
        raise ManifestReadError(f"Cannot read dependency file {path}: {e}", path) from e


def parse_file(path: str, strict: bool = False) -> PackageInventory:
    """Read and parse the manifest at ``path``."""
    try:
        return parse(read_manifest(path), strict=strict)
    except ManifestFormatError as e:
        e.path = path
        raise
