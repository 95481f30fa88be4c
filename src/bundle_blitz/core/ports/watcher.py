from typing import Protocol


class FileWatcherPort(Protocol):
    """Watches a workspace directory and rebuilds when its files change."""

    async def start(self) -> None: ...

    async def stop(self) -> None: ...

    async def wait(self) -> None:
        """Block until the watcher finishes or is stopped."""
        ...
