"""Package inventory data types."""

from .models import (
    Package,
    PackageInventory,
    PackageKey,
    group_sort_key,
    is_supported_manager,
    manager_sort_key,
)

__all__ = [
    "Package",
    "PackageInventory",
    "PackageKey",
    "group_sort_key",
    "is_supported_manager",
    "manager_sort_key",
]
