"""Console output and file helpers shared by the workspace writer and the CLI.

Validation and generation never print.  Everything user-visible goes through
the module-level rich ``console``; messages are markup-escaped so manifest
names and paths containing ``[`` are shown literally.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

console = Console()


def ensure_dir(path: str | Path) -> Path:
    """Create *path* with its parents if needed and return it resolved."""
    directory = Path(path)
    directory.mkdir(parents=True, exist_ok=True)
    return directory.resolve()


async def write_text(path: str | Path, content: str) -> Path:
    """Write *content* as UTF-8 in a worker thread, creating parent directories."""
    target = Path(path)

    def _write() -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")

    await asyncio.to_thread(_write)
    return target


# ---------------------------------------------------------------------------
# Rich output
# ---------------------------------------------------------------------------


def print_summary_table(rows: dict[str, str], title: str = "Summary") -> None:
    """Render *rows* as a two-column table followed by a blank line."""
    table = Table(title=escape(title), header_style="bold cyan")
    table.add_column("Item", style="dim", no_wrap=True)
    table.add_column("Value")
    for label, value in rows.items():
        table.add_row(escape(label), escape(str(value)))
    console.print(table)
    console.print()


def _styled(style: str, message: str) -> None:
    console.print(f"[{style}]{escape(message)}[/{style}]")


def print_success(message: str) -> None:
    _styled("bold green", message)


def print_error(message: str) -> None:
    _styled("bold red", message)


def print_warning(message: str) -> None:
    _styled("bold yellow", message)
