import asyncio
import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from bundle_blitz.cli.bundle import _get_collaborators, _load_workspace
from bundle_blitz.cli.render import err_console, render_diagnostics
from bundle_blitz.core.build import BuildGuard, run_build
from bundle_blitz.core.exceptions import BuildInProgressError
from bundle_blitz.core.ports.watcher import FileWatcherPort
from bundle_blitz.watcher.watchfiles_adapter import WatchfilesWatcher

logger = logging.getLogger(__name__)


async def rebuild(directory: Path, output: Path, guard: BuildGuard) -> bool:
    """Re-read ``directory`` and rewrite ``output``. Returns whether a bundle was written."""
    session = _load_workspace([directory])
    session = session.model_copy(
        update={"files": [f for f in session.files if (directory / f.name).resolve() != output.resolve()]}
    )
    tools = _get_collaborators()
    try:
        async with guard.hold():
            session = await run_build(
                session, transform=tools.transform, formatter=tools.formatter, analyzer=tools.analyzer
            )
    except BuildInProgressError:
        logger.info("Skipping rebuild, previous build still running")
        return False
    render_diagnostics(session.diagnostics.list())
    if session.bundle is None:
        return False
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(session.bundle.text, encoding="utf-8")
    err_console.print(f"[green]Rebuilt[/green] {escape(str(output))} ({session.bundle.total_bytes} bytes)")
    return True


def watch(
    directory: Annotated[Path, typer.Argument(help="Directory to watch.")],
    output: Annotated[Path, typer.Option("--output", "-o", help="Bundle file to keep up to date.")],
) -> None:
    """Rebuild the bundle whenever files in a directory change."""
    if not directory.is_dir():
        err_console.print(f"[red]Not a directory: {escape(str(directory))}[/red]")
        raise typer.Exit(1)
    guard = BuildGuard()

    async def _on_change(_paths: set[Path]) -> None:
        await rebuild(directory, output, guard)

    async def _run() -> None:
        await rebuild(directory, output, guard)
        watcher: FileWatcherPort = WatchfilesWatcher(directory, _on_change, ignore={output})
        await watcher.start()
        err_console.print(f"Watching {escape(str(directory))} (Ctrl+C to stop)")
        try:
            await watcher.wait()
        finally:
            await watcher.stop()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        err_console.print("Stopped.")
