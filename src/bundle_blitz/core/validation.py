import json

from bundle_blitz.core.classifier import classify
from bundle_blitz.core.diagnostics import make_diagnostic
from bundle_blitz.models import Diagnostic, FileKind, WorkspaceFile

_DOC_STRUCTURE_MARKERS = ("#", "- ", "* ")


def _empty_message(file: WorkspaceFile, kind: FileKind) -> str:
    if kind is FileKind.DATA_JSON:
        return f'JSON configuration file "{file.name}" is completely empty.'
    if kind is FileKind.DOC:
        return f'Markdown documentation "{file.name}" has no content.'
    if kind is FileKind.PLAIN_TEXT:
        return f'Plain text file "{file.name}" is blank.'
    return f'File "{file.name}" is empty.'


def _check_json(file: WorkspaceFile) -> list[Diagnostic]:
    try:
        parsed = json.loads(file.content)
    except json.JSONDecodeError as exc:
        return [make_diagnostic(f'Invalid JSON in "{file.name}": {exc}', "error")]
    if isinstance(parsed, dict) and not parsed:
        return [make_diagnostic(f'JSON file "{file.name}" is just an empty object.', "info")]
    return []


def _check_doc(file: WorkspaceFile) -> list[Diagnostic]:
    if any(marker in file.content for marker in _DOC_STRUCTURE_MARKERS):
        return []
    return [
        make_diagnostic(
            f'Markdown document "{file.name}" appears to lack standard formatting (headers/lists).',
            "info",
        )
    ]


def validate(file: WorkspaceFile) -> list[Diagnostic]:
    """Run the structural checks for ``file``'s kind. Never alters the file."""
    kind = classify(file.name)
    if not file.content.strip():
        return [make_diagnostic(_empty_message(file, kind), "warning")]
    if kind is FileKind.DATA_JSON:
        return _check_json(file)
    if kind is FileKind.DOC:
        return _check_doc(file)
    return []
