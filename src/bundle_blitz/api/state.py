from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

from bundle_blitz.config import Settings
from bundle_blitz.core.build import BuildGuard
from bundle_blitz.core.preview import PreviewRegistry
from bundle_blitz.core.session import WorkspaceSession
from bundle_blitz.services import Collaborators


@dataclass
class WorkspaceState:
    """The one workspace served by the API process.

    Routes that change the session hold ``lock`` from reading ``session`` until
    they ``commit``, so a slow request can never overwrite a newer commit.
    """

    settings: Settings
    tools: Collaborators
    session: WorkspaceSession = field(default_factory=WorkspaceSession)
    guard: BuildGuard = field(default_factory=BuildGuard)
    previews: PreviewRegistry = field(default_factory=PreviewRegistry)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)

    def commit(self, session: WorkspaceSession, *, files_changed: bool = False) -> None:
        self.session = session
        if files_changed:
            self.previews.release()
