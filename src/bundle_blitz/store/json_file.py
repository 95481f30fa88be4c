import asyncio
import json
import logging
import os
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

_STORE_FILE = "session.json"


class JsonFileKeyValueStore:
    """Key-value store kept as one JSON object in ``<directory>/session.json``.

    Writes go through a temporary file and ``os.replace`` so a crash never
    leaves a truncated store behind.
    """

    def __init__(self, directory: str | Path) -> None:
        self._path = Path(directory) / _STORE_FILE

    @property
    def path(self) -> Path:
        return self._path

    def _load(self) -> dict[str, str]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Ignoring unreadable store file %s", self._path)
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _dump(self, data: dict[str, str]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            "w", encoding="utf-8", dir=self._path.parent, delete=False, suffix=".tmp"
        ) as temp_file:
            json.dump(data, temp_file)
        os.replace(temp_file.name, self._path)

    async def get(self, key: str) -> str | None:
        data = await asyncio.to_thread(self._load)
        return data.get(key)

    async def set(self, key: str, value: str) -> None:
        await self.set_many({key: value})

    async def set_many(self, items: dict[str, str]) -> None:
        data = await asyncio.to_thread(self._load)
        data.update(items)
        await asyncio.to_thread(self._dump, data)

    async def delete(self, key: str) -> None:
        data = await asyncio.to_thread(self._load)
        if data.pop(key, None) is not None:
            await asyncio.to_thread(self._dump, data)
