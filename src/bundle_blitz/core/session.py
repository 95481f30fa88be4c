from __future__ import annotations

import json
import logging

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from bundle_blitz.core.diagnostics import DiagnosticLog
from bundle_blitz.core.exceptions import UnknownFileError
from bundle_blitz.core.ports.store import KeyValueStore
from bundle_blitz.models import (
    Bundle,
    BundleFormat,
    ComponentMetadata,
    LintIssue,
    RefactorProposal,
    WorkspaceFile,
)

logger = logging.getLogger(__name__)

STORAGE_KEY_CODE = "bundle_blitz_code"
STORAGE_KEY_FILES = "bundle_blitz_files"
STORAGE_KEY_FORMAT = "bundle_blitz_format"

_FILES_ADAPTER = TypeAdapter(list[WorkspaceFile])


class BuildOptions(BaseModel):
    bundle_format: BundleFormat = BundleFormat.JS
    enable_transpilation: bool = True
    enable_formatting: bool = False
    enable_static_lint: bool = True


class Insights(BaseModel):
    analysis: str = ""
    lint_issues: list[LintIssue] = Field(default_factory=list)
    components: list[ComponentMetadata] = Field(default_factory=list)
    refactor: RefactorProposal | None = None


class WorkspaceSession(BaseModel):
    """Serializable state of one workspace.

    Every operation takes a session and returns a new one; the input is left
    untouched so a failed operation cannot leave half-applied changes behind.
    """

    files: list[WorkspaceFile] = Field(default_factory=list)
    bundle: Bundle | None = None
    diagnostics: DiagnosticLog = Field(default_factory=DiagnosticLog)
    options: BuildOptions = Field(default_factory=BuildOptions)
    insights: Insights = Field(default_factory=Insights)

    def draft(self) -> WorkspaceSession:
        return self.model_copy(deep=True)


def remove_file(session: WorkspaceSession, file_id: str) -> WorkspaceSession:
    if not any(f.id == file_id for f in session.files):
        raise UnknownFileError(f"No workspace file with id '{file_id}'.")
    draft = session.draft()
    draft.files = [f for f in draft.files if f.id != file_id]
    return draft


def clear_workspace(session: WorkspaceSession) -> WorkspaceSession:
    """Drop files, bundle, insights and diagnostics. Build options survive."""
    return WorkspaceSession(options=session.options.model_copy())


def update_options(session: WorkspaceSession, **changes: object) -> WorkspaceSession:
    draft = session.draft()
    draft.options = BuildOptions.model_validate({**draft.options.model_dump(), **changes})
    return draft


async def persist_session(store: KeyValueStore, session: WorkspaceSession) -> None:
    if session.bundle is None:
        return
    await store.set_many(
        {
            STORAGE_KEY_CODE: session.bundle.text,
            STORAGE_KEY_FILES: _FILES_ADAPTER.dump_json(session.files).decode("utf-8"),
            STORAGE_KEY_FORMAT: session.bundle.format.value,
        }
    )


async def restore_session(store: KeyValueStore) -> WorkspaceSession | None:
    """Rebuild a session from the store, or ``None`` when it cannot be restored.

    Code and file list must both be present; a lone key or unreadable file
    list counts as nothing stored. A missing format means JS.
    """
    code = await store.get(STORAGE_KEY_CODE)
    raw_files = await store.get(STORAGE_KEY_FILES)
    if code is None or raw_files is None:
        return None
    try:
        files = _FILES_ADAPTER.validate_json(raw_files)
    except (ValidationError, json.JSONDecodeError):
        logger.warning("Stored workspace file list is unreadable; starting with an empty session")
        return None
    stored_format = await store.get(STORAGE_KEY_FORMAT)
    bundle_format = BundleFormat.HTML if stored_format == BundleFormat.HTML.value else BundleFormat.JS
    bundle = Bundle(
        text=code,
        format=bundle_format,
        source_ids=[f.id for f in files],
        source_names=[f.name for f in files],
        total_bytes=len(code.encode("utf-8")),
    )
    logger.info("Restored session with %d file(s)", len(files))
    return WorkspaceSession(files=files, bundle=bundle)


async def forget_session(store: KeyValueStore) -> None:
    await store.delete(STORAGE_KEY_CODE)
    await store.delete(STORAGE_KEY_FILES)
    await store.delete(STORAGE_KEY_FORMAT)
