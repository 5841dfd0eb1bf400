"""Comparison of installed packages against the documented manifest."""

from __future__ import annotations

import logging
from typing import List

from common.logging_utils import extra_context, is_debug_enabled
from inventory.models import PackageInventory, group_sort_key, is_supported_manager, manager_sort_key
from validator.results import Discrepancy
from validator.strict_mode import StrictMode

logger = logging.getLogger(__name__)


def versions_equal(documented: str, installed: str) -> bool:
    """Versions are opaque strings, equal when identical after trimming."""
    return documented.strip() == installed.strip()


def _by_name(item):
    (group, name), _ = item
    return name, group_sort_key(group)


def compare(
    strict_mode: StrictMode,
    installed: PackageInventory,
    documented: PackageInventory,
) -> List[Discrepancy]:
    """Compare two inventories and return the discrepancies in display order.

    Output is grouped by manager in canonical order, then by kind (missing,
    extra, version mismatch), then by name. Neither inventory is modified.

    Args:
        strict_mode: Which discrepancy kinds to report.
        installed: Packages found on disk.
        documented: Packages parsed from the manifest.

    Returns:
        List of Discrepancy; empty when everything matches.
    """
    managers = sorted(set(installed.managers()) | set(documented.managers()), key=manager_sort_key)
    results: List[Discrepancy] = []

    for manager in managers:
        if not is_supported_manager(manager):
            if manager in documented.managers():
                results.append(Discrepancy.unsupported_manager(manager))
            continue

        have = installed.keys(manager)
        want = documented.keys(manager)

        if strict_mode.is_strict_on_missing():
            for (group, name), package in sorted(want.items(), key=_by_name):
                if (group, name) not in have:
                    results.append(Discrepancy.missing(manager, group, name, package.version))

        if strict_mode.is_strict_on_extra():
            for (group, name), package in sorted(have.items(), key=_by_name):
                if (group, name) not in want:
                    results.append(Discrepancy.extra(manager, group, name, package.version))

        if strict_mode.is_strict_on_version_mismatch():
            for (group, name), package in sorted(want.items(), key=_by_name):
                current = have.get((group, name))
                if current is not None and not versions_equal(package.version, current.version):
                    results.append(
                        Discrepancy.version_mismatch(manager, group, name, package.version, current.version)
                    )

    if is_debug_enabled(logger):
        logger.debug(
            "Compared inventories",
            extra=extra_context(
                event="decision", component="validator", action="compare",
                installed=len(installed), documented=len(documented), outcome=len(results),
            ),
        )
    return results
