class InMemoryKeyValueStore:
    def __init__(self) -> None:
        self.values: dict[str, str] = {}

    async def get(self, key: str) -> str | None:
        return self.values.get(key)

    async def set(self, key: str, value: str) -> None:
        self.values[key] = value

    async def set_many(self, items: dict[str, str]) -> None:
        self.values.update(items)

    async def delete(self, key: str) -> None:
        self.values.pop(key, None)
