from typing import Protocol


class TransformStage(Protocol):
    """Down-levels bundle syntax. Raises ``StageError`` on failure."""

    name: str

    async def apply(self, text: str) -> str: ...


class FormatStage(Protocol):
    """Normalizes bundle style. Raises ``StageError`` on failure."""

    name: str

    async def apply(self, text: str) -> str: ...
