from typing import Protocol

from bundle_blitz.models import StaticLintMessage


class StaticAnalyzer(Protocol):
    def verify(self, code: str) -> list[StaticLintMessage]: ...
