from __future__ import annotations

from pydantic import BaseModel, ConfigDict

from bundle_blitz.core.session import BuildOptions, Insights
from bundle_blitz.models import Bundle, BundleFormat, Diagnostic, FileKind, PlacedIssue


class HealthResponse(BaseModel):
    status: str = "ok"


class ReadinessResponse(BaseModel):
    status: str = "ok"
    store: str = "up"


class FileSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    size_bytes: int
    mime_hint: str
    kind: FileKind


class WorkspaceResponse(BaseModel):
    files: list[FileSummary]
    options: BuildOptions
    has_bundle: bool
    building: bool
    diagnostics: list[Diagnostic]


class OptionsUpdate(BaseModel):
    bundle_format: BundleFormat | None = None
    enable_transpilation: bool | None = None
    enable_formatting: bool | None = None
    enable_static_lint: bool | None = None


class BundleResponse(BaseModel):
    bundle: Bundle
    diagnostics: list[Diagnostic]


class PreviewHandleResponse(BaseModel):
    handle: str
    url: str


class RefactorRequest(BaseModel):
    instruction: str


class InsightsResponse(BaseModel):
    insights: Insights
    diagnostics: list[Diagnostic]


class PlacementsResponse(BaseModel):
    line_height_px: int
    placements: list[PlacedIssue]
