from typing import Protocol


class KeyValueStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def set_many(self, items: dict[str, str]) -> None:
        """Write all ``items`` in one operation; either every key lands or none does."""
        ...

    async def delete(self, key: str) -> None: ...
