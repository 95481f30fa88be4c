"""Tests for preview document synthesis."""

from __future__ import annotations

import re

import pytest
from fakes import make_file

from bundle_blitz.core.preview import (
    DEFAULT_SKELETON,
    PREVIEW_TITLE,
    PreviewRegistry,
    escape_script,
    normalize_document,
    synthesize_preview,
)


def _count(pattern: str, html: str) -> int:
    return len(re.findall(pattern, html, re.IGNORECASE))


class TestSynthesizePreview:
    def test_styles_and_scripts_without_markup(self) -> None:
        html = synthesize_preview([make_file("s.css", "body{}"), make_file("a.js", "console.log(1)")])
        assert html.startswith("<!DOCTYPE html>")
        assert _count(r"<head\b", html) == 1
        assert _count(r"<body\b", html) == 1
        assert _count(r"<title\b", html) == 1
        assert DEFAULT_SKELETON in html
        assert html.index("body{}") < html.index("</head>")
        assert html.index("console.log(1)") < html.index("</body>")
        assert html.index("console.log(1)") > html.index(DEFAULT_SKELETON)

    def test_full_document_skeleton_is_kept(self) -> None:
        skeleton = (
            "<!DOCTYPE html>\n<html>\n<head>\n<meta charset=\"utf-8\">\n<title>Mine</title>\n</head>\n"
            "<body>\n<main>hi</main>\n</body>\n</html>\n"
        )
        html = synthesize_preview([make_file("index.html", skeleton), make_file("a.js", "run()")])
        assert "<title>Mine</title>" in html
        assert PREVIEW_TITLE not in html
        assert _count(r"<meta\b[^>]*charset", html) == 1
        assert 'name="viewport"' in html
        assert html.index("run()") < html.index("</body>")

    def test_first_non_blank_markup_wins(self) -> None:
        html = synthesize_preview(
            [make_file("blank.html", "  "), make_file("a.html", "<p>A</p>"), make_file("b.html", "<p>B</p>")]
        )
        assert "<p>A</p>" in html
        assert "<p>B</p>" not in html

    def test_no_scripts_means_no_script_element(self) -> None:
        html = synthesize_preview([make_file("s.css", "p{}")])
        assert "<script" not in html
        assert "<style>" in html

    def test_header_element_is_not_mistaken_for_head(self) -> None:
        html = synthesize_preview([make_file("index.html", "<header>Top</header>")])
        assert _count(r"<head\b", html) == 1
        assert "<header>Top</header>" in html

    def test_script_close_tag_is_escaped(self) -> None:
        html = synthesize_preview([make_file("a.js", 'const s = "</script><b>x</b>";')])
        assert _count(r"</script", html) == 1
        assert "<\\/script>" in html

    def test_body_without_close_tag(self) -> None:
        skeleton = "<html><head></head><body><p>open"
        html = synthesize_preview([make_file("index.html", skeleton), make_file("a.js", "go()")])
        assert _count(r"<body\b", html) == 1
        assert html.index("go()") > html.index("<p>open")

    def test_html_without_body_gets_one_for_scripts(self) -> None:
        html = synthesize_preview([make_file("index.html", "<html><head></head></html>"), make_file("a.js", "go()")])
        assert _count(r"<body\b", html) == 1
        assert html.index("<body>") < html.index("go()") < html.index("</body>") < html.index("</html>")

    def test_doctype_inside_script_string_is_not_the_prolog(self) -> None:
        skeleton = '<html><head><title>x</title></head><body><script>const t = "<!DOCTYPE html>";</script></body></html>'
        html = synthesize_preview([make_file("index.html", skeleton)])
        assert html.startswith("<!DOCTYPE html>")
        assert _count(r"<head\b", html) == 1
        assert _count(r"<html\b", html) == 1
        assert 'const t = "<!DOCTYPE html>";' in html

    def test_doctype_after_leading_comment_is_kept(self) -> None:
        skeleton = "<!-- generated -->\n<!doctype html><html><head></head><body></body></html>"
        html = synthesize_preview([make_file("index.html", skeleton)])
        assert html.startswith("<!-- generated -->")
        assert _count(r"<!doctype", html) == 1
        assert _count(r"<head\b", html) == 1

    def test_section_headers_flatten_and_escape_file_names(self) -> None:
        html = synthesize_preview(
            [make_file("evil*/\nname.css", "p{}"), make_file("bad\nname.js", "go()")]
        )
        style = html[html.index("<style>") : html.index("</style>")]
        assert style.count("*/") == 1
        assert "evil" in style and "name.css" in style
        assert "\nname.css" not in style
        assert "// --- bad name.js ---\ngo()" in html
        assert _count(r"<head\b", html) == 1

    def test_output_fed_back_keeps_single_structure(self) -> None:
        first = synthesize_preview([make_file("s.css", "p{}"), make_file("a.js", "go()")])
        second = synthesize_preview([make_file("index.html", first)])
        for tag in (r"<!doctype", r"<html\b", r"<head\b", r"<body\b", r"<title\b"):
            assert _count(tag, second) == 1, tag


class TestNormalizeDocument:
    def test_is_idempotent(self) -> None:
        once = normalize_document("<p>hello</p>")
        assert normalize_document(once) == once

    @pytest.mark.parametrize("markup", ["", "<div>x</div>", "<head><title>t</title></head><body>b</body>"])
    def test_always_has_structure(self, markup: str) -> None:
        doc = normalize_document(markup)
        assert _count(r"<!doctype html", doc) == 1
        assert _count(r"<html\b", doc) == 1
        assert _count(r"<head\b", doc) == 1


def test_escape_script_is_case_insensitive() -> None:
    assert escape_script("</SCRIPT>") == "<\\/SCRIPT>"


class TestPreviewRegistry:
    def test_acquire_releases_previous(self) -> None:
        registry = PreviewRegistry()
        first = registry.acquire([make_file("a.js", "1")])
        second = registry.acquire([make_file("a.js", "2")])
        assert first.handle != second.handle
        assert registry.get(first.handle) is None
        assert registry.get(second.handle) == second

    def test_release_is_idempotent(self) -> None:
        registry = PreviewRegistry()
        doc = registry.acquire([])
        registry.release(doc.handle)
        registry.release(doc.handle)
        registry.release()
        assert registry.active is None

    def test_release_of_stale_handle_keeps_active(self) -> None:
        registry = PreviewRegistry()
        first = registry.acquire([])
        second = registry.acquire([])
        registry.release(first.handle)
        assert registry.active == second
