from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from datetime import datetime

from bundle_blitz.core.bundle import make_bundle, synthesize
from bundle_blitz.core.classifier import classify
from bundle_blitz.core.exceptions import BuildInProgressError
from bundle_blitz.core.insights import fold_static_lint
from bundle_blitz.core.pipeline import run_transform_pipeline
from bundle_blitz.core.ports.analyzer import StaticAnalyzer
from bundle_blitz.core.ports.stages import FormatStage, TransformStage
from bundle_blitz.core.ports.store import KeyValueStore
from bundle_blitz.core.preview import synthesize_preview
from bundle_blitz.core.session import WorkspaceSession, persist_session
from bundle_blitz.models import BundleFormat, FileKind

logger = logging.getLogger(__name__)


class BuildGuard:
    """Single-flight lock: a second build while one runs is rejected, not queued."""

    def __init__(self) -> None:
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    @asynccontextmanager
    async def hold(self) -> AsyncIterator[None]:
        if self._lock.locked():
            raise BuildInProgressError("A build is already running for this workspace.")
        async with self._lock:
            yield


async def run_build(
    session: WorkspaceSession,
    *,
    transform: TransformStage | None = None,
    formatter: FormatStage | None = None,
    analyzer: StaticAnalyzer | None = None,
    store: KeyValueStore | None = None,
    generated_at: datetime | None = None,
) -> WorkspaceSession:
    """Bundle the workspace and return the updated session.

    With no files the build only logs a warning and leaves the bundle alone.
    """
    draft = session.draft()
    options = draft.options

    if not draft.files:
        draft.diagnostics.append("No files in workspace to bundle.", "warning")
        return draft

    if options.bundle_format is BundleFormat.HTML:
        text = synthesize_preview(draft.files)
    else:
        if not any(classify(f.name) is FileKind.SCRIPT for f in draft.files):
            draft.diagnostics.append(
                "No JS/TS source files found. Bundling remaining text assets as embedded comments.",
                "warning",
            )
        text = synthesize(draft.files, generated_at)
        text = await run_transform_pipeline(
            text,
            draft.diagnostics,
            transform=transform if options.enable_transpilation else None,
            formatter=formatter if options.enable_formatting else None,
        )

    draft.bundle = make_bundle(text, draft.files, options.bundle_format)
    draft.diagnostics.append(f"Workspace bundled successfully as {options.bundle_format.value}.")
    logger.info(
        "Built %s bundle from %d file(s), %d bytes",
        options.bundle_format.value,
        len(draft.files),
        draft.bundle.total_bytes,
    )

    if analyzer is not None and options.enable_static_lint and options.bundle_format is BundleFormat.JS:
        fold_static_lint(draft, analyzer)

    if store is not None:
        await persist_session(store, draft)
    return draft
