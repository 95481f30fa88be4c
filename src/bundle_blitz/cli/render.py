from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from bundle_blitz.models import Diagnostic

err_console = Console(stderr=True)

_SEVERITY_STYLES = {"info": "cyan", "warning": "yellow", "error": "red"}


def render_diagnostics(diagnostics: Sequence[Diagnostic], console: Console = err_console) -> None:
    if not diagnostics:
        return
    table = Table(show_lines=False, title="Diagnostics")
    table.add_column("severity")
    table.add_column("message")
    for d in diagnostics:
        style = _SEVERITY_STYLES[d.severity]
        table.add_row(f"[{style}]{d.severity}[/{style}]", escape(d.message))
    console.print(table)
