"""Preview document synthesis.

Builds one standalone HTML document from the workspace: the first markup file
is the skeleton, missing structure is added around it, styles land at the end
of ``<head>`` and scripts at the end of ``<body>``. Normalization only ever adds
pieces that are missing, so feeding the output back in does not duplicate any
structural tag.
"""

from __future__ import annotations

import logging
import re
import uuid
from collections.abc import Sequence

from bundle_blitz.core.bundle import escape_block_comment, single_line
from bundle_blitz.core.classifier import classify
from bundle_blitz.core.exceptions import InvariantViolation
from bundle_blitz.models import FileKind, PreviewDocument, WorkspaceFile

logger = logging.getLogger(__name__)

DEFAULT_SKELETON = '<div id="root"></div>'
PREVIEW_TITLE = "BundleBlitz Preview"

CHARSET_META = '<meta charset="UTF-8">'
VIEWPORT_META = '<meta name="viewport" content="width=device-width, initial-scale=1.0">'
TITLE_ELEMENT = f"<title>{PREVIEW_TITLE}</title>"

BASELINE_STYLES = """:root {
  font-family: system-ui, -apple-system, sans-serif;
  line-height: 1.5;
  background-color: #ffffff;
  color: #0f172a;
}
@media (prefers-color-scheme: dark) {
  :root { background-color: #0f172a; color: #f1f5f9; }
}
body { margin: 0; padding: 0; }"""

# Only a doctype at the very start counts; leading whitespace and comments may precede it.
_DOCTYPE_RE = re.compile(r"\A(?:\s|<!--.*?-->)*<!doctype\s+html[^>]*>", re.IGNORECASE | re.DOTALL)
_HTML_OPEN_RE = re.compile(r"<html\b[^>]*>", re.IGNORECASE)
_HEAD_OPEN_RE = re.compile(r"<head\b[^>]*>", re.IGNORECASE)
_HEAD_CLOSE_RE = re.compile(r"</head\s*>", re.IGNORECASE)
_BODY_OPEN_RE = re.compile(r"<body\b[^>]*>", re.IGNORECASE)
_BODY_CLOSE_RE = re.compile(r"</body\s*>", re.IGNORECASE)
_HTML_CLOSE_RE = re.compile(r"</html\s*>", re.IGNORECASE)
_CHARSET_RE = re.compile(r"<meta\b[^>]*charset", re.IGNORECASE)
_VIEWPORT_RE = re.compile(r"<meta\b[^>]*viewport", re.IGNORECASE)
_TITLE_RE = re.compile(r"<title\b", re.IGNORECASE)
_SCRIPT_CLOSE_RE = re.compile(r"</(script)", re.IGNORECASE)
_STYLE_CLOSE_RE = re.compile(r"</(style)", re.IGNORECASE)


def escape_script(text: str) -> str:
    """Neutralize ``</script`` so inline code cannot end its own element."""
    return _SCRIPT_CLOSE_RE.sub(r"<\\/\1", text)


def escape_style(text: str) -> str:
    return _STYLE_CLOSE_RE.sub(r"<\\/\1", text)


def _last_match(pattern: re.Pattern[str], text: str) -> re.Match[str] | None:
    match = None
    for match in pattern.finditer(text):
        pass
    return match


def _ensure_root(doc: str) -> str:
    doctype = _DOCTYPE_RE.match(doc)
    if doctype:
        prolog, rest = doc[: doctype.end()], doc[doctype.end() :]
    else:
        prolog, rest = "<!DOCTYPE html>", doc

    if not _HTML_OPEN_RE.search(rest):
        if not _HEAD_OPEN_RE.search(rest) and not _BODY_OPEN_RE.search(rest):
            rest = f"<head>\n</head>\n<body>\n{rest.strip()}\n</body>"
        rest = f'\n<html lang="en">\n{rest.strip()}\n</html>\n'

    if doctype:
        return prolog + rest
    return prolog + "\n" + rest.lstrip("\n")


def _ensure_head(doc: str) -> str:
    if _HEAD_OPEN_RE.search(doc):
        return doc
    html_open = _HTML_OPEN_RE.search(doc)
    assert html_open is not None
    return f"{doc[: html_open.end()]}\n<head>\n</head>{doc[html_open.end() :]}"


def _ensure_head_children(doc: str) -> str:
    missing = []
    if not _CHARSET_RE.search(doc):
        missing.append(CHARSET_META)
    if not _VIEWPORT_RE.search(doc):
        missing.append(VIEWPORT_META)
    if not _TITLE_RE.search(doc):
        missing.append(TITLE_ELEMENT)
    if not missing:
        return doc
    head_open = _HEAD_OPEN_RE.search(doc)
    assert head_open is not None
    injected = "".join(f"\n  {tag}" for tag in missing)
    return doc[: head_open.end()] + injected + doc[head_open.end() :]


def normalize_document(markup: str) -> str:
    """Add whatever of doctype, root, head, meta tags and title is missing."""
    doc = _ensure_root(markup)
    doc = _ensure_head(doc)
    return _ensure_head_children(doc)


def _head_insertion_point(doc: str) -> int:
    head_close = _HEAD_CLOSE_RE.search(doc)
    if head_close:
        return head_close.start()
    body_open = _BODY_OPEN_RE.search(doc)
    if body_open:
        return body_open.start()
    head_open = _HEAD_OPEN_RE.search(doc)
    if head_open is None:
        raise InvariantViolation("Preview document has no <head> after normalization.")
    return head_open.end()


def _body_insertion_point(doc: str) -> tuple[int, bool]:
    """Return where the script block goes and whether a body must be synthesized there."""
    body_close = _last_match(_BODY_CLOSE_RE, doc)
    if body_close:
        return body_close.start(), False
    if _BODY_OPEN_RE.search(doc):
        html_close = _last_match(_HTML_CLOSE_RE, doc)
        return (html_close.start() if html_close else len(doc)), False
    html_close = _last_match(_HTML_CLOSE_RE, doc)
    return (html_close.start() if html_close else len(doc)), True


def _style_block(styles: Sequence[WorkspaceFile]) -> str:
    parts = [BASELINE_STYLES]
    parts.extend(
        f"/* --- {escape_block_comment(single_line(f.name))} --- */\n{f.content}" for f in styles
    )
    return "<style>\n" + escape_style("\n".join(parts)) + "\n</style>\n"


def _script_block(scripts: Sequence[WorkspaceFile]) -> str:
    source = "\n".join(f"// --- {single_line(f.name)} ---\n{f.content}" for f in scripts)
    return f'<script type="module">\n{escape_script(source)}\n</script>\n'


def synthesize_preview(files: Sequence[WorkspaceFile]) -> str:
    """Build a complete, renderable HTML document from the workspace files."""
    skeleton = next(
        (f.content for f in files if classify(f.name) is FileKind.MARKUP and f.content.strip()),
        DEFAULT_SKELETON,
    )
    styles = [f for f in files if classify(f.name) is FileKind.STYLE]
    scripts = [f for f in files if classify(f.name) is FileKind.SCRIPT]

    doc = normalize_document(skeleton)

    # Both points are taken on the normalized text so injected content can
    # never be mistaken for structure.
    head_at = _head_insertion_point(doc)
    body_at, synthesize_body = _body_insertion_point(doc)

    insertions = [(head_at, _style_block(styles))]
    if scripts:
        block = _script_block(scripts)
        if synthesize_body:
            logger.warning("Preview skeleton has no <body>; synthesizing one for scripts")
            block = f"<body>\n{block}</body>\n"
        insertions.append((body_at, block))

    # Splice from the back so earlier offsets stay valid.
    for position, block in sorted(insertions, key=lambda item: item[0], reverse=True):
        doc = doc[:position] + block + doc[position:]
    return doc


class PreviewRegistry:
    """Holds the single live preview document and its handle.

    Acquiring a new preview releases the previous one; release is idempotent.
    """

    def __init__(self) -> None:
        self._active: PreviewDocument | None = None

    @property
    def active(self) -> PreviewDocument | None:
        return self._active

    def acquire(self, files: Sequence[WorkspaceFile]) -> PreviewDocument:
        html = synthesize_preview(files)
        self.release()
        self._active = PreviewDocument(handle=uuid.uuid4().hex, html=html)
        logger.info("Acquired preview %s", self._active.handle)
        return self._active

    def get(self, handle: str) -> PreviewDocument | None:
        if self._active is not None and self._active.handle == handle:
            return self._active
        return None

    def release(self, handle: str | None = None) -> None:
        if self._active is None:
            return
        if handle is not None and handle != self._active.handle:
            return
        logger.info("Released preview %s", self._active.handle)
        self._active = None
