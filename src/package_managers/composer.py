"""Composer adapter: installed packages from composer.lock."""

from __future__ import annotations

import logging
import os
from typing import List, Optional

from common.errors import MetadataParseError
from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants, PackageManagers
from inventory.models import Package, PackageInventory
from package_managers.base import PackageManagerAdapter

logger = logging.getLogger(__name__)

# composer.lock section -> group
_SECTIONS = (
    ("packages", None),
    ("packages-dev", Constants.DEV_GROUP),
)


class ComposerPackageManager(PackageManagerAdapter):
    """Reads ``packages`` and ``packages-dev`` from composer.lock."""

    name = PackageManagers.COMPOSER.value
    project_file = Constants.COMPOSER_JSON_FILE

    def get_installed_packages(self, directory: str) -> PackageInventory:
        lock_path = os.path.join(directory, Constants.COMPOSER_LOCK_FILE)
        data = self._load_json(lock_path)
        if not isinstance(data, dict):
            raise MetadataParseError(f"composer: unexpected structure in {lock_path}", self.name, lock_path)

        packages: List[Package] = []
        for section, group in _SECTIONS:
            entries = data.get(section) or []
            if not isinstance(entries, list):
                raise MetadataParseError(f"composer: '{section}' is not a list in {lock_path}", self.name, lock_path)
            packages.extend(self._read_section(entries, group, lock_path))

        if is_debug_enabled(logger):
            logger.debug(
                "Read composer.lock",
                extra=extra_context(event="scan", component="composer", action="read_lock",
                                    target=lock_path, count=len(packages)),
            )
        return PackageInventory.sorted(packages)

    def _read_section(self, entries: list, group: Optional[str], lock_path: str) -> List[Package]:
        packages = []
        for entry in entries:
            name = entry.get("name") if isinstance(entry, dict) else None
            version = entry.get("version") if isinstance(entry, dict) else None
            if not isinstance(name, str) or not name.strip() or not isinstance(version, str):
                raise MetadataParseError(
                    f"composer: package entry without name/version in {lock_path}", self.name, lock_path
                )
            packages.append(Package(manager=self.name, name=name.strip(), version=version.strip(), group=group))
        return packages
