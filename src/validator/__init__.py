"""Validation of documented dependencies against installed ones."""

from .compare import compare, versions_equal
from .results import Discrepancy, DiscrepancyKind
from .strict_mode import StrictMode

__all__ = [
    "Discrepancy",
    "DiscrepancyKind",
    "StrictMode",
    "compare",
    "versions_equal",
]
