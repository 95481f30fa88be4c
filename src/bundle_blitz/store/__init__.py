from bundle_blitz.store.json_file import JsonFileKeyValueStore
from bundle_blitz.store.memory import InMemoryKeyValueStore

__all__ = [
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
]
