import logging
import mimetypes
import uuid
from collections.abc import Iterable
from pathlib import Path

from bundle_blitz.core.classifier import is_binary
from bundle_blitz.core.session import WorkspaceSession
from bundle_blitz.core.validation import validate
from bundle_blitz.models import RawFile, WorkspaceFile

logger = logging.getLogger(__name__)


def decode_text(data: bytes) -> str:
    """Decode as UTF-8, dropping a leading byte-order mark like browsers do."""
    return data.decode("utf-8-sig", errors="replace")


def ingest_files(session: WorkspaceSession, raw_files: Iterable[RawFile]) -> WorkspaceSession:
    """Validate and add dropped files to the workspace, in drop order.

    Each file's diagnostics are logged before the file is added. Binary files
    are skipped and reported once for the whole batch.
    """
    draft = session.draft()
    added = 0
    binary_count = 0

    for raw in raw_files:
        if is_binary(raw.data):
            binary_count += 1
            continue

        file = WorkspaceFile(
            id=str(uuid.uuid4()),
            name=raw.name,
            size_bytes=raw.size_bytes,
            content=decode_text(raw.data),
            mime_hint=raw.mime_hint,
        )
        draft.diagnostics.extend(validate(file))
        draft.files.append(file)
        added += 1

    if added:
        draft.diagnostics.append(f"Added {added} file(s) to workspace.")
    if binary_count:
        draft.diagnostics.append(f"Skipped {binary_count} binary/system metadata file(s).", "warning")

    if added or binary_count:
        logger.info("Ingested %d file(s), skipped %d binary file(s)", added, binary_count)
    return draft


def _expand(path: Path) -> list[tuple[Path, str]]:
    if path.is_dir():
        return [(p, p.relative_to(path).as_posix()) for p in sorted(path.rglob("*")) if p.is_file()]
    return [(path, path.name)]


def read_raw_files(paths: Iterable[str | Path]) -> list[RawFile]:
    """Load files from disk as raw drops. Directories are walked in sorted order."""
    raw_files: list[RawFile] = []
    for path in paths:
        for file_path, name in _expand(Path(path)):
            try:
                data = file_path.read_bytes()
            except FileNotFoundError:
                raise FileNotFoundError(f"File not found: {file_path}") from None
            mime_hint, _ = mimetypes.guess_type(name)
            raw_files.append(RawFile(name=name, size_bytes=len(data), data=data, mime_hint=mime_hint or ""))
    return raw_files
