"""Tests for the watchfiles watcher adapter."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, patch

from bundle_blitz.core.ports.watcher import FileWatcherPort
from bundle_blitz.watcher.watchfiles_adapter import WatchfilesWatcher


class TestRelevant:
    def test_keeps_workspace_files(self, tmp_path: Path) -> None:
        watcher = WatchfilesWatcher(tmp_path, AsyncMock())
        paths = {tmp_path / "a.js", tmp_path / "b.css", tmp_path / "photo.png", tmp_path / "Makefile"}
        assert watcher.relevant(paths) == {tmp_path / "a.js", tmp_path / "b.css"}

    def test_ignores_output(self, tmp_path: Path) -> None:
        output = tmp_path / "bundle.js"
        watcher = WatchfilesWatcher(tmp_path, AsyncMock(), ignore={output})
        assert watcher.relevant({output, tmp_path / "a.js"}) == {tmp_path / "a.js"}


class TestWatchfilesWatcher:
    def test_implements_protocol(self) -> None:
        watcher: FileWatcherPort = WatchfilesWatcher("/tmp", AsyncMock())
        assert hasattr(watcher, "start")
        assert hasattr(watcher, "stop")

    def test_callback_receives_relevant_changes(self, tmp_path: Path) -> None:
        callback = AsyncMock()
        changes = {(1, str(tmp_path / "a.js")), (2, str(tmp_path / "image.png"))}

        async def fake_awatch(*_args: Any, **_kwargs: Any) -> AsyncIterator[set[tuple[int, str]]]:
            yield changes

        async def run() -> None:
            with patch("bundle_blitz.watcher.watchfiles_adapter.awatch", fake_awatch):
                watcher = WatchfilesWatcher(tmp_path, callback)
                await watcher.start()
                await watcher.wait()
                await watcher.stop()

        asyncio.run(run())
        callback.assert_awaited_once_with({tmp_path / "a.js"})

    def test_callback_errors_do_not_stop_watching(self, tmp_path: Path) -> None:
        callback = AsyncMock(side_effect=[RuntimeError("boom"), None])

        async def fake_awatch(*_args: Any, **_kwargs: Any) -> AsyncIterator[set[tuple[int, str]]]:
            yield {(1, str(tmp_path / "a.js"))}
            yield {(1, str(tmp_path / "b.js"))}

        async def run() -> None:
            with patch("bundle_blitz.watcher.watchfiles_adapter.awatch", fake_awatch):
                watcher = WatchfilesWatcher(tmp_path, callback)
                await watcher.start()
                await watcher.wait()

        asyncio.run(run())
        assert callback.await_count == 2

    def test_stop_without_start_is_noop(self, tmp_path: Path) -> None:
        asyncio.run(WatchfilesWatcher(tmp_path, AsyncMock()).stop())
