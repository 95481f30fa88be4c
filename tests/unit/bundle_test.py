"""Tests for bundle synthesis."""

from __future__ import annotations

from datetime import datetime, timezone

from fakes import make_file

from bundle_blitz.core.bundle import compute_stats, escape_block_comment, make_bundle, strip_timestamp, synthesize
from bundle_blitz.models import BundleFormat

STAMP = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class TestSynthesize:
    def test_empty_workspace_is_header_only(self) -> None:
        text = synthesize([], STAMP)
        assert text.startswith("/**\n * Bundle generated by BundleBlitz\n")
        assert " * Files: 0" in text
        assert text.endswith(" */\n")

    def test_scripts_emitted_verbatim_in_order(self) -> None:
        files = [make_file("a.js", "const a = 1;"), make_file("b.ts", "let b = 2;\n")]
        text = synthesize(files, STAMP)
        assert "// >>> begin a.js (12 bytes)\nconst a = 1;\n// <<< end a.js" in text
        assert text.index("a.js") < text.index("b.ts")

    def test_non_scripts_embedded_as_comments(self) -> None:
        text = synthesize([make_file("style.css", "body { color: red; }")], STAMP)
        assert "/* --- style.css (20 bytes) ---\nbody { color: red; }\n*/" in text

    def test_comment_terminator_is_escaped(self) -> None:
        text = synthesize([make_file("notes.txt", "ends here */ and more")], STAMP)
        assert "ends here *\\/ and more" in text
        body = text.split("*/", 1)[1]
        assert body.count("*/") == 1

    def test_deterministic_apart_from_timestamp(self) -> None:
        files = [make_file("a.js", "x();"), make_file("b.md", "# doc")]
        first = synthesize(files)
        second = synthesize(files, datetime(2030, 1, 1, tzinfo=timezone.utc))
        assert first != second
        assert strip_timestamp(first) == strip_timestamp(second)

    def test_multiline_names_are_flattened(self) -> None:
        text = synthesize([make_file("evil\nname.js", "x")], STAMP)
        assert "// >>> begin evil name.js" in text


def test_escape_block_comment() -> None:
    assert escape_block_comment("a */ b */") == "a *\\/ b *\\/"


def test_make_bundle_records_sources() -> None:
    files = [make_file("a.js", "x"), make_file("b.css", "y")]
    bundle = make_bundle("héllo", files, BundleFormat.JS)
    assert bundle.source_names == ["a.js", "b.css"]
    assert bundle.source_ids == [f.id for f in files]
    assert bundle.total_bytes == 6


def test_compute_stats() -> None:
    files = [make_file("a.js", "1\n2\n3"), make_file("b.js", "x"), make_file("c.css", "")]
    stats = compute_stats(files)
    assert stats.file_count == 3
    assert stats.lines_of_code == 4
    assert stats.total_size == 6
    assert stats.kinds == {"script": 2, "style": 1}
