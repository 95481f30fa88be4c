from typing import Protocol

from bundle_blitz.models import ComponentMetadata, LintIssue


class AiClient(Protocol):
    async def analyze(self, bundle: str) -> str: ...

    async def lint(self, bundle: str) -> list[LintIssue]: ...

    async def refactor(self, bundle: str, instruction: str) -> str: ...

    async def discover_components(self, bundle: str) -> list[ComponentMetadata]: ...
