from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable, Coroutine
from pathlib import Path
from typing import Any

from watchfiles import awatch

from bundle_blitz.core.classifier import classify
from bundle_blitz.models import FileKind

logger = logging.getLogger(__name__)

# Editors often write a file several times per save.
DEFAULT_DEBOUNCE_MS = 300


def _is_workspace_file(path: Path) -> bool:
    return classify(path.name) is not FileKind.UNKNOWN


class WatchfilesWatcher:
    """Watch a directory for workspace-file changes and trigger a callback.

    Implements the ``FileWatcherPort`` protocol. Paths in ``ignore`` (such as
    the bundle being written) never trigger the callback.
    """

    def __init__(
        self,
        directory: str | Path,
        on_change: Callable[[set[Path]], Coroutine[Any, Any, None]],
        ignore: set[Path] | None = None,
        debounce_ms: int = DEFAULT_DEBOUNCE_MS,
    ) -> None:
        self._directory = Path(directory)
        self._on_change = on_change
        self._ignore = {p.resolve() for p in ignore or set()}
        self._debounce_ms = debounce_ms
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._task = asyncio.create_task(self._watch())
        logger.info("Watcher started for %s", self._directory)

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None
        logger.info("Watcher stopped for %s", self._directory)

    async def wait(self) -> None:
        if self._task is not None:
            await self._task

    def relevant(self, paths: set[Path]) -> set[Path]:
        return {p for p in paths if _is_workspace_file(p) and p.resolve() not in self._ignore}

    async def _watch(self) -> None:
        async for changes in awatch(self._directory, debounce=self._debounce_ms):
            paths = self.relevant({Path(p) for _, p in changes})
            if paths:
                logger.info("Workspace change in %s", ", ".join(sorted(p.name for p in paths)))
                try:
                    await self._on_change(paths)
                except Exception:
                    logger.exception("Rebuild after change failed")
