"""Node adapter: direct dependencies from package.json with installed versions.

Installed versions come from package-lock.json (lockfileVersion 1, 2 and 3).
Without a lockfile each package's own ``node_modules/<name>/package.json`` is
read instead.
"""

from __future__ import annotations

import logging
import os
from typing import Dict, List, Optional

from common.errors import MetadataNotFoundError, MetadataParseError
from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants, PackageManagers
from inventory.models import Package, PackageInventory
from package_managers.base import PackageManagerAdapter

logger = logging.getLogger(__name__)

# package.json section -> group
_SECTIONS = (
    ("dependencies", None),
    ("devDependencies", Constants.DEV_GROUP),
)


def _lock_versions(data: dict) -> Dict[str, str]:
    """Map top-level package name to installed version from a parsed package-lock.json."""
    versions: Dict[str, str] = {}
    lockfile_version = data.get("lockfileVersion", 1)

    if lockfile_version in (2, 3):
        prefix = Constants.NODE_MODULES_DIR + "/"
        for pkg_path, pkg_info in (data.get("packages") or {}).items():
            # nested node_modules are transitive copies, not the top-level install
            if not pkg_path.startswith(prefix) or not isinstance(pkg_info, dict):
                continue
            name = pkg_path[len(prefix):]
            if "/" + Constants.NODE_MODULES_DIR + "/" in name:
                continue
            version = pkg_info.get("version")
            if isinstance(version, str):
                versions[name] = version

    # v1 layout, also kept by v2 lockfiles for backwards compatibility
    for name, pkg_info in (data.get("dependencies") or {}).items():
        if isinstance(pkg_info, dict) and isinstance(pkg_info.get("version"), str):
            versions.setdefault(name, pkg_info["version"])
    return versions


class NodePackageManager(PackageManagerAdapter):
    """Reads direct dependencies of a node project."""

    name = PackageManagers.NODE.value
    project_file = Constants.PACKAGE_JSON_FILE

    def get_installed_packages(self, directory: str) -> PackageInventory:
        package_json_path = os.path.join(directory, Constants.PACKAGE_JSON_FILE)
        manifest = self._load_json(package_json_path)
        if not isinstance(manifest, dict):
            raise MetadataParseError(
                f"node: unexpected structure in {package_json_path}", self.name, package_json_path
            )

        lock_path = os.path.join(directory, Constants.PACKAGE_LOCK_FILE)
        versions: Optional[Dict[str, str]] = None
        if os.path.isfile(lock_path):
            lock = self._load_json(lock_path)
            if not isinstance(lock, dict):
                raise MetadataParseError(f"node: unexpected structure in {lock_path}", self.name, lock_path)
            versions = _lock_versions(lock)
        else:
            modules_dir = os.path.join(directory, Constants.NODE_MODULES_DIR)
            if not os.path.isdir(modules_dir):
                raise MetadataNotFoundError(
                    f"node: neither {lock_path} nor {modules_dir} exists", self.name, lock_path
                )

        packages: List[Package] = []
        for section, group in _SECTIONS:
            declared = manifest.get(section) or {}
            if not isinstance(declared, dict):
                raise MetadataParseError(
                    f"node: '{section}' is not an object in {package_json_path}", self.name, package_json_path
                )
            for name in declared:
                if not name.strip():
                    raise MetadataParseError(
                        f"node: empty dependency name in {package_json_path}", self.name, package_json_path
                    )
                version = versions.get(name) if versions is not None else self._module_version(directory, name)
                if version is None:
                    logger.warning("node: %s is declared in package.json but not installed", name)
                    continue
                packages.append(Package(manager=self.name, name=name, version=version, group=group))

        if is_debug_enabled(logger):
            logger.debug(
                "Read node packages",
                extra=extra_context(event="scan", component="node", action="read_installed",
                                    target=directory, count=len(packages),
                                    source="lockfile" if versions is not None else "node_modules"),
            )
        return PackageInventory.sorted(packages)

    def _module_version(self, directory: str, name: str) -> Optional[str]:
        path = os.path.join(directory, Constants.NODE_MODULES_DIR, *name.split("/"), Constants.PACKAGE_JSON_FILE)
        if not os.path.isfile(path):
            return None
        data = self._load_json(path)
        version = data.get("version") if isinstance(data, dict) else None
        if not isinstance(version, str):
            raise MetadataParseError(f"node: no version in {path}", self.name, path)
        return version
