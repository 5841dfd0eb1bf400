"""Discrepancy results produced by validation."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional


class DiscrepancyKind(Enum):
    """Kinds of differences between installed and documented packages."""

    MISSING = "missing"
    EXTRA = "extra"
    VERSION_MISMATCH = "version_mismatch"
    UNSUPPORTED_MANAGER = "unsupported_manager"


@dataclass(frozen=True)
class Discrepancy:
    """One finding. Which fields are set depends on ``kind``."""

    kind: DiscrepancyKind
    manager: str
    group: Optional[str] = None
    name: Optional[str] = None
    documented_version: Optional[str] = None
    installed_version: Optional[str] = None

    @classmethod
    def missing(cls, manager: str, group: Optional[str], name: str, documented_version: str) -> "Discrepancy":
        return cls(DiscrepancyKind.MISSING, manager, group, name, documented_version=documented_version)

    @classmethod
    def extra(cls, manager: str, group: Optional[str], name: str, installed_version: str) -> "Discrepancy":
        return cls(DiscrepancyKind.EXTRA, manager, group, name, installed_version=installed_version)

    @classmethod
    def version_mismatch(
        cls, manager: str, group: Optional[str], name: str, documented_version: str, installed_version: str
    ) -> "Discrepancy":
        return cls(
            DiscrepancyKind.VERSION_MISMATCH, manager, group, name,
            documented_version=documented_version, installed_version=installed_version,
        )

    @classmethod
    def unsupported_manager(cls, manager: str) -> "Discrepancy":
        return cls(DiscrepancyKind.UNSUPPORTED_MANAGER, manager)

    @property
    def label(self) -> str:
        """``name`` qualified by its group when not in the default group."""
        if self.group is None:
            return str(self.name)
        return f"{self.name} ({self.group})"

    def render(self) -> str:
        return _TEMPLATES[self.kind].format(
            manager=self.manager,
            label=self.label,
            documented=self.documented_version,
            installed=self.installed_version,
        )

    def __str__(self) -> str:
        return self.render()

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "manager": self.manager,
            "group": self.group,
            "name": self.name,
            "documentedVersion": self.documented_version,
            "installedVersion": self.installed_version,
            "message": self.render(),
        }


_TEMPLATES = {
    DiscrepancyKind.MISSING: "[{manager}] {label}: documented as {documented} but not installed",
    DiscrepancyKind.EXTRA: "[{manager}] {label}: installed as {installed} but not documented",
    DiscrepancyKind.VERSION_MISMATCH: (
        "[{manager}] {label}: documented version {documented} does not match installed version {installed}"
    ),
    DiscrepancyKind.UNSUPPORTED_MANAGER: "[{manager}] package manager is not supported",
}

if set(_TEMPLATES) != set(DiscrepancyKind):
    raise RuntimeError("Every DiscrepancyKind needs a render template")
