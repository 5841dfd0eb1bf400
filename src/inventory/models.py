"""Package and inventory value types shared by parsers, adapters and the validator."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from constants import PackageManagers

# (manager, group, name)
PackageKey = Tuple[str, Optional[str], str]

_CANONICAL_MANAGERS = [m.value for m in PackageManagers]


def manager_sort_key(manager: str) -> Tuple[int, str]:
    """Sort key placing supported managers first, in declaration order."""
    if manager in _CANONICAL_MANAGERS:
        return _CANONICAL_MANAGERS.index(manager), ""
    return len(_CANONICAL_MANAGERS), manager


def group_sort_key(group: Optional[str]) -> Tuple[int, str]:
    """Sort key placing the default group before named groups."""
    return (0, "") if group is None else (1, group)


def is_supported_manager(manager: str) -> bool:
    return manager in _CANONICAL_MANAGERS


@dataclass(frozen=True)
class Package:
    """A single documented or installed package."""

    manager: str
    name: str
    version: str
    group: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.manager or not self.manager.strip():
            raise ValueError("Package manager must be non-empty")
        if not self.name or not self.name.strip():
            raise ValueError("Package name must be non-empty")
        if self.group is not None and not self.group.strip():
            raise ValueError("Package group must be None or non-empty")

    @property
    def key(self) -> PackageKey:
        return self.manager, self.group, self.name


class PackageInventory:
    """Ordered, read-only collection of packages.

    The flat sequence is the source of truth; grouped views and key lookups
    are derived from an index built once on construction. A repeated
    ``(manager, group, name)`` key replaces the earlier package in place.
    """

    __slots__ = ("_packages", "_index")

    def __init__(self, packages: Iterable[Package] = ()):
        index: Dict[PackageKey, int] = {}
        ordered: List[Package] = []
        for package in packages:
            position = index.get(package.key)
            if position is None:
                index[package.key] = len(ordered)
                ordered.append(package)
            else:
                ordered[position] = package
        self._packages: Tuple[Package, ...] = tuple(ordered)
        self._index = index

    @classmethod
    def sorted(cls, packages: Iterable[Package]) -> "PackageInventory":
        """Build an inventory in installed order: canonical manager, then name."""
        return cls(sorted(packages, key=lambda p: (manager_sort_key(p.manager), p.name)))

    @classmethod
    def merge(cls, *inventories: "PackageInventory") -> "PackageInventory":
        return cls(p for inventory in inventories for p in inventory)

    def __iter__(self) -> Iterator[Package]:
        return iter(self._packages)

    def __len__(self) -> int:
        return len(self._packages)

    def __bool__(self) -> bool:
        return bool(self._packages)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PackageInventory):
            return NotImplemented
        return self._packages == other._packages

    def __repr__(self) -> str:
        return f"PackageInventory({list(self._packages)!r})"

    def all_flat(self) -> List[Package]:
        return list(self._packages)

    def get(self, manager: str, name: str, group: Optional[str] = None) -> Optional[Package]:
        position = self._index.get((manager, group, name))
        return None if position is None else self._packages[position]

    def managers(self) -> List[str]:
        """Managers in order of first appearance."""
        return list(dict.fromkeys(p.manager for p in self._packages))

    def groups(self, manager: str) -> List[Optional[str]]:
        """Groups of ``manager`` in order of first appearance."""
        return list(dict.fromkeys(p.group for p in self._packages if p.manager == manager))

    def keys(self, manager: str) -> Dict[Tuple[Optional[str], str], Package]:
        """Map of ``(group, name)`` to package for one manager."""
        return {(p.group, p.name): p for p in self._packages if p.manager == manager}

    def grouped(self) -> Dict[str, Dict[Optional[str], List[Package]]]:
        """Nested manager -> group -> packages view, preserving order."""
        result: Dict[str, Dict[Optional[str], List[Package]]] = {}
        for package in self._packages:
            result.setdefault(package.manager, {}).setdefault(package.group, []).append(package)
        return result
