"""Render and write DEPENDENCIES.md from an installed inventory.

The writer regenerates every package list from what is installed. Text the
user added by hand is carried over:

- the preamble before the first heading,
- annotation lines placed directly under a package entry (dropped together
  with the package),
- prose inside a manager or group section, kept before or after that
  section's package list,
- freeform sections and sections of managers without an adapter, copied
  verbatim after the managed sections in source order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from common.errors import ManifestWriteError
from constants import Constants
from inventory.models import (
    PackageInventory,
    PackageKey,
    group_sort_key,
    is_supported_manager,
    manager_sort_key,
)
from manifest.parser import LineKind, iter_manifest

logger = logging.getLogger(__name__)

# (manager, group)
SectionKey = Tuple[str, Optional[str]]


@dataclass
class SectionNotes:
    """Prose of one manager/group section, split around its package list."""

    head: List[str] = field(default_factory=list)
    tail: List[str] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.head or self.tail)


@dataclass
class ManifestLayout:
    """Hand-written parts of a previous manifest."""

    preamble: List[str] = field(default_factory=list)
    annotations: Dict[PackageKey, List[str]] = field(default_factory=dict)
    notes: Dict[SectionKey, SectionNotes] = field(default_factory=dict)
    passthrough: List[List[str]] = field(default_factory=list)


def _trim_trailing_blanks(lines: List[str]) -> None:
    while lines and not lines[-1].strip():
        lines.pop()


def extract_layout(text: str) -> ManifestLayout:
    """Collect everything in ``text`` that is not a generated package line."""
    layout = ManifestLayout()
    # verbatim target: the preamble, then any passthrough block
    block: Optional[List[str]] = layout.preamble
    section: Optional[SectionKey] = None
    current: Optional[PackageKey] = None
    seen_item = False
    gap = False

    for line in iter_manifest(text):
        raw = line.raw.rstrip()
        if line.kind in (LineKind.MANAGER, LineKind.FREEFORM):
            current = None
            if line.kind is LineKind.MANAGER and is_supported_manager(line.manager):
                block, section, seen_item, gap = None, (line.manager, None), False, False
            else:
                block, section = [raw], None
                layout.passthrough.append(block)
            continue
        if block is not None:
            block.append(raw)
            continue

        if line.kind is LineKind.GROUP:
            section, current, seen_item, gap = (line.manager, line.group), None, False, False
        elif line.kind is LineKind.ITEM:
            current = (line.manager, line.group, line.name)
            layout.annotations[current] = []
            seen_item, gap = True, False
        elif line.kind is LineKind.BLANK:
            current, gap = None, True
        elif current is not None and not line.malformed_item:
            layout.annotations[current].append(raw)
        else:
            current = None
            notes = layout.notes.setdefault(section, SectionNotes())
            target = notes.tail if seen_item else notes.head
            if target and gap:
                target.append("")
            target.append(raw)
            gap = False

    _trim_trailing_blanks(layout.preamble)
    for passthrough in layout.passthrough:
        _trim_trailing_blanks(passthrough)
    layout.annotations = {k: v for k, v in layout.annotations.items() if v}
    layout.notes = {k: v for k, v in layout.notes.items() if v}
    return layout


def _paragraph(lines: List[str]) -> None:
    if lines and lines[-1]:
        lines.append("")


def render_manifest(
    installed: PackageInventory,
    documented: Optional[PackageInventory] = None,
    previous_text: Optional[str] = None,
    newline: str = "\n",
) -> str:
    """Render manifest text for ``installed``.

    Args:
        installed: Packages to document.
        documented: Previously documented packages, used to report removals.
        previous_text: Previous manifest text whose hand-written parts are kept.
        newline: Line separator for the output.

    Returns:
        The manifest text, ending with a newline.
    """
    if newline not in Constants.NEWLINES:
        raise ValueError(f"Unsupported newline sequence: {newline!r}")

    layout = extract_layout(previous_text) if previous_text else ManifestLayout()
    lines: List[str] = list(layout.preamble)

    grouped = installed.grouped()
    managers = set(grouped) | {manager for manager, _ in layout.notes}
    for manager in sorted(managers, key=manager_sort_key):
        groups = grouped.get(manager, {})
        group_names = set(groups) | {g for m, g in layout.notes if m == manager}
        _paragraph(lines)
        lines.append(f"# {manager}")
        for group in sorted(group_names, key=group_sort_key):
            if group is not None:
                _paragraph(lines)
                lines.append(f"## {group}")
            notes = layout.notes.get((manager, group), SectionNotes())
            if notes.head:
                _paragraph(lines)
                lines.extend(notes.head)
            if groups.get(group):
                _paragraph(lines)
                for package in groups[group]:
                    lines.append(f"- {package.name}: {package.version}")
                    lines.extend(layout.annotations.get(package.key, []))
            if notes.tail:
                _paragraph(lines)
                lines.extend(notes.tail)

    for block in layout.passthrough:
        _paragraph(lines)
        lines.extend(block)

    if documented is not None:
        for package in documented:
            if package.key not in installed and is_supported_manager(package.manager):
                logger.info("Removing %s (%s) from the manifest: no longer installed", package.name, package.manager)

    return newline.join(lines) + newline


def write_manifest(path: str, text: str) -> None:
    """Write manifest text to ``path`` as UTF-8.

    Raises:
        ManifestWriteError: If the file cannot be written.
    """
    try:
        with open(path, "w", encoding="utf-8", newline="") as fh:
            fh.write(text)
    except OSError as e:
        raise ManifestWriteError(f"Cannot write dependency file {path}: {e}", path) from e
    logger.info("Dependency file written: %s", path)
