import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bundle_blitz.cli.render import err_console, render_diagnostics
from bundle_blitz.config import get_settings
from bundle_blitz.core.build import run_build
from bundle_blitz.core.bundle import compute_stats
from bundle_blitz.core.ingest import ingest_files, read_raw_files
from bundle_blitz.core.preview import synthesize_preview
from bundle_blitz.core.session import WorkspaceSession
from bundle_blitz.models import BundleFormat
from bundle_blitz.services import Collaborators, build_collaborators, default_options

console = Console()

PathsArgument = Annotated[list[Path], typer.Argument(help="Files or directories to add to the workspace.")]


def _get_collaborators() -> Collaborators:
    return build_collaborators(get_settings())


def _load_workspace(paths: list[Path]) -> WorkspaceSession:
    try:
        raw_files = read_raw_files(paths)
    except FileNotFoundError as exc:
        err_console.print(f"[red]{escape(str(exc))}[/red]")
        raise typer.Exit(1) from None
    session = WorkspaceSession(options=default_options(get_settings()))
    return ingest_files(session, raw_files)


def _emit(text: str, output: Path | None) -> None:
    if output is None:
        typer.echo(text, nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    err_console.print(f"[green]Wrote[/green] {len(text.encode('utf-8'))} bytes to {escape(str(output))}")


def bundle(
    paths: PathsArgument,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write the bundle here instead of stdout.")] = None,
    bundle_format: Annotated[
        BundleFormat, typer.Option("--format", "-f", case_sensitive=False, help="Bundle as JS or HTML.")
    ] = BundleFormat.JS,
    transpile: Annotated[bool | None, typer.Option("--transpile/--no-transpile", help="Run the transform stage.")] = None,
    pretty: Annotated[bool | None, typer.Option("--pretty/--no-pretty", help="Run the format stage.")] = None,
    lint: Annotated[bool, typer.Option("--lint/--no-lint", help="Run static analysis on the bundle.")] = True,
    save: Annotated[bool, typer.Option(help="Persist the session for `session show` and the API.")] = False,
) -> None:
    """Bundle workspace files into one artifact."""
    session = _load_workspace(paths)
    options = session.options.model_copy(
        update={
            "bundle_format": bundle_format,
            "enable_static_lint": lint,
            **({"enable_transpilation": transpile} if transpile is not None else {}),
            **({"enable_formatting": pretty} if pretty is not None else {}),
        }
    )
    session = session.model_copy(update={"options": options})
    tools = _get_collaborators()

    session = asyncio.run(
        run_build(
            session,
            transform=tools.transform,
            formatter=tools.formatter,
            analyzer=tools.analyzer,
            store=tools.store if save else None,
        )
    )
    render_diagnostics(session.diagnostics.list())
    if session.bundle is None:
        raise typer.Exit(1)
    _emit(session.bundle.text, output)


def preview(
    paths: PathsArgument,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Write the document here instead of stdout.")] = None,
) -> None:
    """Synthesize a standalone preview document."""
    session = _load_workspace(paths)
    render_diagnostics(session.diagnostics.list())
    _emit(synthesize_preview(session.files), output)


def stats(paths: PathsArgument) -> None:
    """Show size, file count and lines of code for the workspace."""
    session = _load_workspace(paths)
    result = compute_stats(session.files)
    table = Table(title="Workspace")
    table.add_column("metric")
    table.add_column("value")
    table.add_row("files", str(result.file_count))
    table.add_row("total size (bytes)", str(result.total_size))
    table.add_row("lines of code", str(result.lines_of_code))
    for kind, count in sorted(result.kinds.items()):
        table.add_row(f"kind: {kind}", str(count))
    console.print(table)
