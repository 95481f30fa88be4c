import asyncio

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bundle_blitz.config import get_settings
from bundle_blitz.core.ports.store import KeyValueStore
from bundle_blitz.core.session import forget_session, restore_session
from bundle_blitz.store import JsonFileKeyValueStore

session_app = typer.Typer(help="Inspect the persisted workspace session.")
console = Console()


def _get_store() -> KeyValueStore:
    return JsonFileKeyValueStore(get_settings().state_dir)


@session_app.command("show")
def show() -> None:
    """List the files of the persisted session."""
    restored = asyncio.run(restore_session(_get_store()))
    if restored is None:
        console.print("[yellow]No saved session.[/yellow]")
        return
    table = Table()
    table.add_column("id")
    table.add_column("name")
    table.add_column("size")
    for f in restored.files:
        table.add_row(f.id, escape(f.name), str(f.size_bytes))
    console.print(table)
    assert restored.bundle is not None
    console.print(f"Bundle: {restored.bundle.total_bytes} bytes, format {restored.bundle.format.value}")


@session_app.command("clear")
def clear() -> None:
    """Forget the persisted session."""
    asyncio.run(forget_session(_get_store()))
    console.print("[green]Session cleared.[/green]")
