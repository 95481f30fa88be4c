"""Hand the bundle to the AI and static-analysis collaborators and log what comes back.

Every call needs an existing bundle. A collaborator failure becomes one error
diagnostic and leaves the bundle and earlier insights as they were.
"""

from __future__ import annotations

import difflib
import logging

from bundle_blitz.core.exceptions import CollaboratorError
from bundle_blitz.core.ports.ai import AiClient
from bundle_blitz.core.ports.analyzer import StaticAnalyzer
from bundle_blitz.core.session import WorkspaceSession
from bundle_blitz.models import RefactorProposal

logger = logging.getLogger(__name__)


def fold_static_lint(draft: WorkspaceSession, analyzer: StaticAnalyzer) -> None:
    """Append one diagnostic per static-analysis message to ``draft``'s log."""
    assert draft.bundle is not None
    try:
        messages = analyzer.verify(draft.bundle.text)
    except CollaboratorError as exc:
        logger.warning("Static analysis failed: %s", exc)
        draft.diagnostics.append(f"Static analysis failed: {exc}", "error")
        return

    if not messages:
        draft.diagnostics.append("[lint] No static style issues found.", "info")
        return

    for msg in messages:
        severity = "error" if msg.severity == 2 else "warning"
        rule = f" ({msg.rule_id})" if msg.rule_id else ""
        draft.diagnostics.append(f"[lint] Line {msg.line}: {msg.message}{rule}", severity)


def _require_bundle(session: WorkspaceSession, action: str) -> WorkspaceSession | None:
    if session.bundle is not None and session.bundle.text:
        return None
    draft = session.draft()
    draft.diagnostics.append(f"Bundle the workspace first before {action}.", "warning")
    return draft


def _failed(session: WorkspaceSession, label: str, exc: Exception) -> WorkspaceSession:
    logger.warning("%s failed: %s", label, exc)
    draft = session.draft()
    draft.diagnostics.append(f"{label} failed: {exc}", "error")
    return draft


async def run_audit(session: WorkspaceSession, ai: AiClient) -> WorkspaceSession:
    if (blocked := _require_bundle(session, "auditing")) is not None:
        return blocked
    assert session.bundle is not None
    try:
        analysis = await ai.analyze(session.bundle.text)
    except CollaboratorError as exc:
        return _failed(session, "Audit", exc)

    draft = session.draft()
    draft.insights.analysis = analysis or "No analysis could be generated."
    draft.diagnostics.append("AI code audit complete.")
    return draft


async def run_ai_lint(session: WorkspaceSession, ai: AiClient) -> WorkspaceSession:
    if (blocked := _require_bundle(session, "linting")) is not None:
        return blocked
    assert session.bundle is not None
    try:
        issues = await ai.lint(session.bundle.text)
    except CollaboratorError as exc:
        return _failed(session, "Linting", exc)

    draft = session.draft()
    draft.insights.lint_issues = list(issues or [])
    draft.diagnostics.append(f"AI linting complete. Found {len(draft.insights.lint_issues)} issues.")
    return draft


async def run_discovery(session: WorkspaceSession, ai: AiClient) -> WorkspaceSession:
    if (blocked := _require_bundle(session, "scanning")) is not None:
        return blocked
    assert session.bundle is not None
    try:
        components = await ai.discover_components(session.bundle.text)
    except CollaboratorError as exc:
        return _failed(session, "Discovery", exc)

    draft = session.draft()
    draft.insights.components = list(components or [])
    draft.diagnostics.append(
        f"Component discovery complete. Identified {len(draft.insights.components)} components."
    )
    return draft


def unified_diff(original: str, modified: str, name: str = "bundle.js") -> str:
    """Unified diff of two bundle texts; empty when they are identical."""
    if original == modified:
        return ""
    lines = difflib.unified_diff(
        original.splitlines(),
        modified.splitlines(),
        fromfile=f"a/{name}",
        tofile=f"b/{name}",
        lineterm="",
    )
    return "\n".join(lines)


async def run_refactor(session: WorkspaceSession, ai: AiClient, instruction: str) -> WorkspaceSession:
    if (blocked := _require_bundle(session, "refactoring")) is not None:
        return blocked
    assert session.bundle is not None
    original = session.bundle.text
    try:
        modified = await ai.refactor(original, instruction)
    except CollaboratorError as exc:
        return _failed(session, "Refactor", exc)

    draft = session.draft()
    if not modified:
        draft.diagnostics.append("Refactor returned no code; bundle left unchanged.", "warning")
        return draft
    draft.insights.refactor = RefactorProposal(
        instruction=instruction,
        original=original,
        modified=modified,
        diff=unified_diff(original, modified),
    )
    draft.diagnostics.append("AI refactor proposal ready.")
    return draft


def accept_refactor(session: WorkspaceSession) -> WorkspaceSession:
    """Replace the bundle text with the pending refactor proposal."""
    proposal = session.insights.refactor
    if proposal is None or session.bundle is None:
        draft = session.draft()
        draft.diagnostics.append("No refactor proposal to apply.", "warning")
        return draft
    draft = session.draft()
    draft.bundle = session.bundle.model_copy(
        update={"text": proposal.modified, "total_bytes": len(proposal.modified.encode("utf-8"))}
    )
    draft.insights.refactor = None
    draft.diagnostics.append("Refactor applied to bundle.")
    return draft
