"""Package manager adapters.

- base.py: shared adapter behaviour and JSON loading
- composer.py: composer.lock reader
- node.py: package.json + package-lock.json / node_modules reader
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from common.errors import ConfigurationError
from inventory.models import PackageInventory

from .base import PackageManagerAdapter
from .composer import ComposerPackageManager
from .node import NodePackageManager

logger = logging.getLogger(__name__)

SUPPORTED_ADAPTERS: Dict[str, type] = {
    ComposerPackageManager.name: ComposerPackageManager,
    NodePackageManager.name: NodePackageManager,
}


def get_adapter(manager: str) -> PackageManagerAdapter:
    """Return the adapter for ``manager``.

    Raises:
        ConfigurationError: If the manager is not supported.
    """
    adapter_cls = SUPPORTED_ADAPTERS.get(manager.lower())
    if adapter_cls is None:
        raise ConfigurationError(f"Unsupported package manager: {manager}")
    return adapter_cls()


def collect_installed(directory: str, managers: Optional[Iterable[str]] = None) -> PackageInventory:
    """Gather installed packages of every manager used in ``directory``.

    Without ``managers`` only adapters whose project file exists are asked.
    Explicitly selected managers are always read, so their missing metadata
    is an error rather than an empty result. Adapter errors propagate.
    """
    explicit = managers is not None
    names = list(managers) if explicit else list(SUPPORTED_ADAPTERS)
    inventories = []
    for name in names:
        adapter = get_adapter(name)
        if not explicit and not adapter.is_present(directory):
            logger.debug("Skipping %s: no %s in %s", adapter.name, adapter.project_file, directory)
            continue
        inventory = adapter.get_installed_packages(directory)
        logger.info("Found %d installed %s package(s)", len(inventory), adapter.name)
        inventories.append(inventory)
    return PackageInventory.sorted(PackageInventory.merge(*inventories))


__all__ = [
    "ComposerPackageManager",
    "NodePackageManager",
    "PackageManagerAdapter",
    "SUPPORTED_ADAPTERS",
    "collect_installed",
    "get_adapter",
]
