"""Tests for workspace session operations and persistence."""

from __future__ import annotations

import asyncio

import pytest
from fakes import make_file

from bundle_blitz.core.bundle import make_bundle
from bundle_blitz.core.exceptions import UnknownFileError
from bundle_blitz.core.session import (
    STORAGE_KEY_CODE,
    STORAGE_KEY_FILES,
    STORAGE_KEY_FORMAT,
    BuildOptions,
    WorkspaceSession,
    clear_workspace,
    forget_session,
    persist_session,
    remove_file,
    restore_session,
    update_options,
)
from bundle_blitz.models import BundleFormat
from bundle_blitz.store import InMemoryKeyValueStore


class _RecordingStore(InMemoryKeyValueStore):
    def __init__(self) -> None:
        super().__init__()
        self.writes: list[dict[str, str]] = []

    async def set(self, key: str, value: str) -> None:
        self.writes.append({key: value})
        await super().set(key, value)

    async def set_many(self, items: dict[str, str]) -> None:
        self.writes.append(dict(items))
        await super().set_many(items)


def _bundled() -> WorkspaceSession:
    files = [make_file("a.js", "x"), make_file("b.css", "y")]
    return WorkspaceSession(files=files, bundle=make_bundle("bundle text", files, BundleFormat.JS))


class TestOperations:
    def test_remove_file(self) -> None:
        session = _bundled()
        target = session.files[0]
        updated = remove_file(session, target.id)
        assert [f.name for f in updated.files] == ["b.css"]
        assert len(session.files) == 2

    def test_remove_unknown_file_raises(self) -> None:
        with pytest.raises(UnknownFileError):
            remove_file(_bundled(), "missing")

    def test_clear_keeps_options(self) -> None:
        session = _bundled().model_copy(update={"options": BuildOptions(enable_formatting=True)})
        session.diagnostics.append("old")
        cleared = clear_workspace(session)
        assert cleared.files == []
        assert cleared.bundle is None
        assert len(cleared.diagnostics) == 0
        assert cleared.options.enable_formatting is True

    def test_update_options(self) -> None:
        updated = update_options(WorkspaceSession(), bundle_format=BundleFormat.HTML, enable_static_lint=False)
        assert updated.options.bundle_format is BundleFormat.HTML
        assert updated.options.enable_static_lint is False
        assert updated.options.enable_transpilation is True


class TestPersistence:
    def test_round_trip(self, in_memory_store: InMemoryKeyValueStore) -> None:
        session = _bundled()
        asyncio.run(persist_session(in_memory_store, session))
        restored = asyncio.run(restore_session(in_memory_store))
        assert restored is not None
        assert restored.files == session.files
        assert restored.bundle is not None
        assert restored.bundle.text == "bundle text"
        assert restored.bundle.source_names == ["a.js", "b.css"]

    def test_html_bundle_restores_as_html(self, in_memory_store: InMemoryKeyValueStore) -> None:
        files = [make_file("index.html", "<p>hi</p>")]
        session = WorkspaceSession(files=files, bundle=make_bundle("<!DOCTYPE html>", files, BundleFormat.HTML))
        asyncio.run(persist_session(in_memory_store, session))
        restored = asyncio.run(restore_session(in_memory_store))
        assert restored is not None
        assert restored.bundle is not None
        assert restored.bundle.format is BundleFormat.HTML

    def test_missing_format_restores_as_js(self, in_memory_store: InMemoryKeyValueStore) -> None:
        asyncio.run(persist_session(in_memory_store, _bundled()))
        del in_memory_store.values[STORAGE_KEY_FORMAT]
        restored = asyncio.run(restore_session(in_memory_store))
        assert restored is not None
        assert restored.bundle is not None
        assert restored.bundle.format is BundleFormat.JS

    def test_persist_writes_every_key_at_once(self) -> None:
        store = _RecordingStore()
        asyncio.run(persist_session(store, _bundled()))
        assert len(store.writes) == 1
        assert set(store.writes[0]) == {STORAGE_KEY_CODE, STORAGE_KEY_FILES, STORAGE_KEY_FORMAT}
        assert store.writes[0][STORAGE_KEY_FORMAT] == "JS"

    def test_nothing_persisted_without_bundle(self, in_memory_store: InMemoryKeyValueStore) -> None:
        asyncio.run(persist_session(in_memory_store, WorkspaceSession(files=[make_file("a.js", "x")])))
        assert in_memory_store.values == {}

    def test_lone_key_restores_nothing(self, in_memory_store: InMemoryKeyValueStore) -> None:
        in_memory_store.values[STORAGE_KEY_CODE] = "code only"
        assert asyncio.run(restore_session(in_memory_store)) is None

    def test_unreadable_files_restore_nothing(self, in_memory_store: InMemoryKeyValueStore) -> None:
        in_memory_store.values[STORAGE_KEY_CODE] = "code"
        in_memory_store.values[STORAGE_KEY_FILES] = "not json"
        assert asyncio.run(restore_session(in_memory_store)) is None

    def test_forget(self, in_memory_store: InMemoryKeyValueStore) -> None:
        asyncio.run(persist_session(in_memory_store, _bundled()))
        asyncio.run(forget_session(in_memory_store))
        assert in_memory_store.values == {}
