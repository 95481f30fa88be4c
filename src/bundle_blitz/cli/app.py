import logging
from typing import Annotated

import typer
from dotenv import load_dotenv
from rich.logging import RichHandler

from bundle_blitz.cli.bundle import bundle, preview, stats
from bundle_blitz.cli.render import err_console
from bundle_blitz.cli.serve import serve_app
from bundle_blitz.cli.session import session_app
from bundle_blitz.cli.watch import watch

app = typer.Typer(
    name="bundle-blitz",
    help="BundleBlitz CLI: bundle and preview ad-hoc workspaces.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show debug logging.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


app.command("bundle")(bundle)
app.command("preview")(preview)
app.command("stats")(stats)
app.command("watch")(watch)
app.add_typer(session_app, name="session")
app.add_typer(serve_app, name="serve")


def main() -> None:
    load_dotenv()
    app()
