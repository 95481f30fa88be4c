from typing import Annotated

import typer
from rich.console import Console

from bundle_blitz.config import get_settings

serve_app = typer.Typer(help="Start servers.")
console = Console()


@serve_app.command("api")
def api(
    host: Annotated[str, typer.Option(help="Interface to bind.")] = "127.0.0.1",
    port: Annotated[int, typer.Option(help="Port to listen on.")] = 8000,
    log_level: Annotated[str, typer.Option(help="uvicorn log level.")] = "info",
) -> None:
    """Serve the workspace HTTP API; the saved session is restored on startup."""
    import uvicorn

    from bundle_blitz.api.app import create_app

    app = create_app()
    console.print(f"[green]Serving BundleBlitz API on {host}:{port}[/green] (state: {get_settings().state_dir})")
    uvicorn.run(app, host=host, port=port, log_level=log_level)
