from collections import Counter
from collections.abc import Sequence
from datetime import datetime, timezone

from bundle_blitz.core.classifier import classify
from bundle_blitz.models import Bundle, BundleFormat, BundleStats, FileKind, WorkspaceFile

BLOCK_COMMENT_CLOSE = "*/"
ESCAPED_BLOCK_COMMENT_CLOSE = "*\\/"
GENERATED_PREFIX = " * Generated: "


def escape_block_comment(text: str) -> str:
    """Make ``text`` safe to place inside ``/* ... */``."""
    return text.replace(BLOCK_COMMENT_CLOSE, ESCAPED_BLOCK_COMMENT_CLOSE)


def single_line(name: str) -> str:
    return " ".join(name.splitlines())


def _header(file_count: int, generated_at: datetime) -> str:
    return "\n".join(
        [
            "/**",
            " * Bundle generated by BundleBlitz",
            f"{GENERATED_PREFIX}{generated_at.isoformat()}",
            f" * Files: {file_count}",
            " */",
        ]
    )


def _script_section(file: WorkspaceFile) -> str:
    name = single_line(file.name)
    body = file.content if file.content.endswith("\n") or not file.content else file.content + "\n"
    return f"// >>> begin {name} ({file.size_bytes} bytes)\n{body}// <<< end {name}"


def _embedded_section(file: WorkspaceFile) -> str:
    name = escape_block_comment(single_line(file.name))
    return f"/* --- {name} ({file.size_bytes} bytes) ---\n{escape_block_comment(file.content)}\n*/"


def synthesize(files: Sequence[WorkspaceFile], generated_at: datetime | None = None) -> str:
    """Concatenate ``files`` into one script-shaped text.

    Scripts are emitted verbatim between line-comment markers. Everything else
    is embedded in a block comment with its comment terminators escaped, so the
    result stays parseable whatever the files contain.
    """
    stamp = generated_at or datetime.now(timezone.utc)
    sections = [_header(len(files), stamp)]
    for file in files:
        if classify(file.name) is FileKind.SCRIPT:
            sections.append(_script_section(file))
        else:
            sections.append(_embedded_section(file))
    return "\n\n".join(sections) + "\n"


def make_bundle(text: str, files: Sequence[WorkspaceFile], bundle_format: BundleFormat) -> Bundle:
    return Bundle(
        text=text,
        format=bundle_format,
        source_ids=[f.id for f in files],
        source_names=[f.name for f in files],
        total_bytes=len(text.encode("utf-8")),
    )


def strip_timestamp(bundle_text: str) -> str:
    return "\n".join(line for line in bundle_text.split("\n") if not line.startswith(GENERATED_PREFIX))


def compute_stats(files: Sequence[WorkspaceFile]) -> BundleStats:
    kinds = Counter(classify(f.name).value for f in files)
    return BundleStats(
        total_size=sum(f.size_bytes for f in files),
        file_count=len(files),
        lines_of_code=sum(len(f.content.splitlines()) for f in files),
        kinds=dict(kinds),
    )
