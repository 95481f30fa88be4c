from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from fastapi import HTTPException, status

from bundle_blitz.api.state import WorkspaceState
from bundle_blitz.config import get_settings
from bundle_blitz.core.session import WorkspaceSession, restore_session
from bundle_blitz.services import build_collaborators, default_options

logger = logging.getLogger(__name__)

_state: WorkspaceState | None = None


async def init_state() -> WorkspaceState:
    """Create the workspace state, restoring a persisted session when one exists."""
    global _state  # noqa: PLW0603
    if _state is None:
        settings = get_settings()
        tools = build_collaborators(settings)
        restored = await restore_session(tools.store) if tools.store is not None else None
        session = restored or WorkspaceSession()
        session = session.model_copy(update={"options": default_options(settings)})
        _state = WorkspaceState(settings=settings, tools=tools, session=session)
    return _state


async def get_state() -> AsyncIterator[WorkspaceState]:
    """Yield the ``WorkspaceState``, creating it lazily on first call."""
    yield await init_state()


def shutdown_state() -> None:
    global _state  # noqa: PLW0603
    if _state is not None:
        _state.previews.release()
        _state = None


def ensure_idle(state: WorkspaceState) -> None:
    if state.guard.busy:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="A build is in progress.")
