from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

Severity = Literal["info", "warning", "error"]


class FileKind(str, Enum):
    SCRIPT = "script"
    STYLE = "style"
    MARKUP = "markup"
    DATA_JSON = "data_json"
    DOC = "doc"
    PLAIN_TEXT = "plain_text"
    UNKNOWN = "unknown"


class BundleFormat(str, Enum):
    JS = "JS"
    HTML = "HTML"


class RawFile(BaseModel):
    """One dropped file as delivered by the raw file source."""

    name: str
    size_bytes: int
    data: bytes
    mime_hint: str = ""


class WorkspaceFile(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    size_bytes: int
    content: str
    mime_hint: str = ""


class Diagnostic(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    severity: Severity
    message: str
    created_at: datetime


class Bundle(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    format: BundleFormat = BundleFormat.JS
    source_ids: list[str] = Field(default_factory=list)
    source_names: list[str] = Field(default_factory=list)
    total_bytes: int = 0


class BundleStats(BaseModel):
    total_size: int
    file_count: int
    lines_of_code: int
    kinds: dict[str, int] = Field(default_factory=dict)


class LintIssue(BaseModel):
    line: int | None = None
    severity: Severity = "warning"
    message: str
    suggestion: str | None = None


class PlacedIssue(BaseModel):
    issue: LintIssue
    top_offset_px: int | None = None


class StaticLintMessage(BaseModel):
    line: int
    severity: Literal[1, 2]
    message: str
    rule_id: str | None = None


class ComponentProp(BaseModel):
    name: str
    type: str
    options: list[str] | None = None
    default_value: str | None = None
    description: str | None = None


class ComponentMetadata(BaseModel):
    name: str
    description: str | None = None
    props: list[ComponentProp] = Field(default_factory=list)


class RefactorProposal(BaseModel):
    instruction: str
    original: str
    modified: str
    diff: str


class PreviewDocument(BaseModel):
    model_config = ConfigDict(frozen=True)

    handle: str
    html: str
