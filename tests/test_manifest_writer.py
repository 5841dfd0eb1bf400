"""Tests for manifest rendering and writing."""

import pytest

from common.errors import ManifestWriteError
from inventory.models import Package, PackageInventory
from manifest.parser import parse
from manifest.writer import SectionNotes, extract_layout, render_manifest, write_manifest


def _installed():
    return PackageInventory.sorted([
        Package("node", "left-pad", "1.3.0"),
        Package("composer", "symfony/console", "v5.4.0"),
        Package("composer", "phpunit/phpunit", "9.5.10", group="dev"),
    ])


class TestRenderManifest:
    """Test render_manifest()."""

    def test_layout(self):
        text = render_manifest(_installed())
        assert text == (
            "# composer\n"
            "\n"
            "- symfony/console: v5.4.0\n"
            "\n"
            "## dev\n"
            "\n"
            "- phpunit/phpunit: 9.5.10\n"
            "\n"
            "# node\n"
            "\n"
            "- left-pad: 1.3.0\n"
        )

    def test_parses_back_to_same_packages(self):
        installed = _installed()
        reparsed = parse(render_manifest(installed))
        assert {(p.key, p.version) for p in reparsed} == {(p.key, p.version) for p in installed}

    def test_keeps_preamble_and_annotations(self):
        previous = (
            "Reviewed by the platform team.\n"
            "\n"
            "# composer\n"
            "- symfony/console: v5.3.0\n"
            "  Needed for the bin/ scripts.\n"
            "\n"
            "# node\n"
            "- removed-lib: 0.1.0\n"
            "  This note goes away with the package.\n"
        )
        text = render_manifest(_installed(), parse(previous), previous)
        assert text.startswith("Reviewed by the platform team.\n\n# composer\n")
        assert "- symfony/console: v5.4.0\n  Needed for the bin/ scripts.\n" in text
        assert "removed-lib" not in text
        assert "This note goes away" not in text

    def test_crlf_newline(self):
        text = render_manifest(PackageInventory([Package("node", "a", "1")]), newline="\r\n")
        assert text == "# node\r\n\r\n- a: 1\r\n"

    def test_rejects_unknown_newline(self):
        with pytest.raises(ValueError):
            render_manifest(PackageInventory(), newline="\r")

    def test_empty_inventory(self):
        assert render_manifest(PackageInventory()) == "\n"

    def test_keeps_section_notes_and_freeform_sections(self):
        previous = (
            "# composer\n"
            "- a/a: 0.9.0\n"
            "\n"
            "Section note about composer.\n"
            "\n"
            "# Project notes\n"
            "Reviewed by legal.\n"
        )
        installed = PackageInventory([Package("composer", "a/a", "1.0.0")])
        text = render_manifest(installed, parse(previous), previous)
        assert text == (
            "# composer\n"
            "\n"
            "- a/a: 1.0.0\n"
            "\n"
            "Section note about composer.\n"
            "\n"
            "# Project notes\n"
            "Reviewed by legal.\n"
        )

    def test_unsupported_manager_section_kept_after_managed_ones(self):
        previous = (
            "# yarn\n"
            "- lodash: 4.17.21\n"
            "\n"
            "# node\n"
            "- a: 0.1.0\n"
        )
        installed = PackageInventory([Package("node", "a", "1")])
        text = render_manifest(installed, parse(previous), previous)
        assert text == "# node\n\n- a: 1\n\n# yarn\n- lodash: 4.17.21\n"
        assert parse(text).get("yarn", "lodash").version == "4.17.21"

    def test_head_note_placed_before_items(self):
        previous = "# node\nDirect dependencies only.\n- a: 0.1.0\n"
        installed = PackageInventory([Package("node", "a", "1")])
        text = render_manifest(installed, None, previous)
        assert text == "# node\n\nDirect dependencies only.\n\n- a: 1\n"


class TestExtractLayout:
    """Test collection of hand-written text from a previous manifest."""

    def test_annotation_stops_at_blank_line(self):
        layout = extract_layout(
            "# node\n- a: 1\n  first note\n\nsection prose\n- b: 2\n"
        )
        assert layout.preamble == []
        assert layout.annotations == {("node", None, "a"): ["  first note"]}
        assert layout.notes == {("node", None): SectionNotes(tail=["section prose"])}

    def test_preamble_trailing_blanks_trimmed(self):
        layout = extract_layout("Title\n\n\n# node\n")
        assert layout.preamble == ["Title"]

    def test_section_prose_before_items_keeps_paragraphs(self):
        layout = extract_layout(
            "# composer\nIntro line.\n\nSecond paragraph.\n- a/a: 1\n\n## dev\nCI only.\n"
        )
        assert layout.notes == {
            ("composer", None): SectionNotes(head=["Intro line.", "", "Second paragraph."]),
            ("composer", "dev"): SectionNotes(head=["CI only."]),
        }

    def test_freeform_and_unsupported_sections_kept_verbatim(self):
        layout = extract_layout(
            "# yarn\n- lodash: 4.17.21\n\n"
            "# Project notes\nReviewed by legal.\n- not a package: here\n\n\n"
        )
        assert layout.passthrough == [
            ["# yarn", "- lodash: 4.17.21"],
            ["# Project notes", "Reviewed by legal.", "- not a package: here"],
        ]
        assert layout.annotations == {}
        assert layout.notes == {}


class TestWriteManifest:
    """Test writing the manifest to disk."""

    def test_writes_without_newline_translation(self, tmp_path):
        path = tmp_path / "DEPENDENCIES.md"
        write_manifest(str(path), "# node\r\n")
        assert path.read_bytes() == b"# node\r\n"

    def test_unwritable_path(self, tmp_path):
        with pytest.raises(ManifestWriteError):
            write_manifest(str(tmp_path / "missing-dir" / "DEPENDENCIES.md"), "# node\n")
