import secrets
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from bundle_blitz.models import Diagnostic, Severity


def new_diagnostic_id() -> str:
    return secrets.token_hex(6)


def make_diagnostic(message: str, severity: Severity = "info") -> Diagnostic:
    return Diagnostic(
        id=new_diagnostic_id(),
        severity=severity,
        message=message,
        created_at=datetime.now(timezone.utc),
    )


class DiagnosticLog(BaseModel):
    """Append-only event log, oldest first.

    Entries are never reordered or deduplicated; the same message appended
    twice yields two entries.
    """

    entries: list[Diagnostic] = Field(default_factory=list)

    def append(self, message: str, severity: Severity = "info") -> Diagnostic:
        diagnostic = make_diagnostic(message, severity)
        self.entries.append(diagnostic)
        return diagnostic

    def extend(self, diagnostics: list[Diagnostic]) -> None:
        self.entries.extend(diagnostics)

    def dismiss(self, diagnostic_id: str) -> None:
        self.entries = [d for d in self.entries if d.id != diagnostic_id]

    def clear(self) -> None:
        self.entries = []

    def list(self) -> list[Diagnostic]:
        return list(self.entries)

    def __len__(self) -> int:
        return len(self.entries)
