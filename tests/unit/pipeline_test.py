"""Tests for the optional transform/format stage pipeline."""

from __future__ import annotations

import asyncio

from fakes import FakeStage

from bundle_blitz.core.diagnostics import DiagnosticLog
from bundle_blitz.core.pipeline import run_stages, run_transform_pipeline


def test_transform_runs_before_format() -> None:
    log = DiagnosticLog()
    transform = FakeStage("transform", suffix="|t")
    formatter = FakeStage("format", suffix="|f")
    result = asyncio.run(run_transform_pipeline("src", log, transform=transform, formatter=formatter))
    assert result == "src|t|f"
    assert formatter.calls == ["src|t"]
    assert len(log) == 0


def test_disabled_stages_are_skipped() -> None:
    log = DiagnosticLog()
    assert asyncio.run(run_transform_pipeline("src", log)) == "src"


def test_failing_transform_keeps_input_and_warns() -> None:
    log = DiagnosticLog()
    transform = FakeStage("transform", fail="Unexpected token")
    formatter = FakeStage("format", suffix="|f")
    result = asyncio.run(run_transform_pipeline("src", log, transform=transform, formatter=formatter))
    assert result == "src|f"
    [warning] = log.list()
    assert warning.severity == "warning"
    assert warning.message == "transform stage failed, keeping previous output: Unexpected token"


def test_every_failure_is_logged() -> None:
    log = DiagnosticLog()
    stages = [FakeStage("transform", fail="a"), FakeStage("format", fail="b")]
    assert asyncio.run(run_stages("src", stages, log)) == "src"
    assert [d.severity for d in log.list()] == ["warning", "warning"]
