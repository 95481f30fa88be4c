from bundle_blitz.models import FileKind

_EXTENSION_KIND_MAP = {
    "cjs": FileKind.SCRIPT,
    "js": FileKind.SCRIPT,
    "jsx": FileKind.SCRIPT,
    "mjs": FileKind.SCRIPT,
    "ts": FileKind.SCRIPT,
    "tsx": FileKind.SCRIPT,
    "css": FileKind.STYLE,
    "less": FileKind.STYLE,
    "sass": FileKind.STYLE,
    "scss": FileKind.STYLE,
    "htm": FileKind.MARKUP,
    "html": FileKind.MARKUP,
    "json": FileKind.DATA_JSON,
    "markdown": FileKind.DOC,
    "md": FileKind.DOC,
    "csv": FileKind.PLAIN_TEXT,
    "txt": FileKind.PLAIN_TEXT,
}

_KIND_LABELS = {
    FileKind.SCRIPT: "JavaScript",
    FileKind.STYLE: "Style",
    FileKind.MARKUP: "HTML",
    FileKind.DATA_JSON: "JSON Config",
    FileKind.DOC: "Markdown Doc",
    FileKind.PLAIN_TEXT: "Plain Text",
}

# Binary sniffing looks at a bounded prefix only.
BINARY_SAMPLE_SIZE = 8192
BINARY_NON_PRINTABLE_RATIO = 0.1


def extension_of(name: str) -> str:
    """Return the lower-cased suffix after the final dot, or ``""`` when there is none."""
    _, dot, suffix = name.rpartition(".")
    if not dot:
        return ""
    return suffix.lower()


def classify(name: str) -> FileKind:
    return _EXTENSION_KIND_MAP.get(extension_of(name), FileKind.UNKNOWN)


def kind_label(name: str) -> str:
    kind = classify(name)
    if kind is FileKind.UNKNOWN:
        return extension_of(name).upper() or "FILE"
    return _KIND_LABELS[kind]


def _is_non_printable(byte: int) -> bool:
    # Tab, LF, VT, FF and CR (0x09-0x0D) are treated as text, as is BEL/BS (0x07-0x08).
    return byte < 0x07 or 0x0D < byte < 0x20


def is_binary(data: bytes) -> bool:
    """Guess whether ``data`` is binary from its first 8 KiB.

    A NUL byte decides immediately. Otherwise the sample is binary when more
    than 10% of it falls in the control ranges above. This is a heuristic:
    text in exotic encodings or binaries with a printable header can land on
    the wrong side.
    """
    sample = data[:BINARY_SAMPLE_SIZE]
    if not sample:
        return False
    non_printable = 0
    for byte in sample:
        if byte == 0:
            return True
        if _is_non_printable(byte):
            non_printable += 1
    return non_printable / len(sample) > BINARY_NON_PRINTABLE_RATIO
