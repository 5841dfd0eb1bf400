"""DEPENDENCIES.md manifest reading and writing."""

from .parser import LineKind, ManifestLine, iter_manifest, parse, parse_file, read_manifest
from .writer import ManifestLayout, SectionNotes, extract_layout, render_manifest, write_manifest

__all__ = [
    "LineKind",
    "ManifestLine",
    "ManifestLayout",
    "SectionNotes",
    "extract_layout",
    "iter_manifest",
    "parse",
    "parse_file",
    "read_manifest",
    "render_manifest",
    "write_manifest",
]
