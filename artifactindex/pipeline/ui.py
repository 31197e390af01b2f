"""Central UI handler for artifactindex.

Single source of truth for Rich console styling. Import this instead of
instantiating Console() in every command file.

Usage:
    from artifactindex.pipeline.ui import console, print_header, print_success

    console.print("[success]Export finished[/success]")
"""

import sys

from rich.console import Console
from rich.theme import Theme

INDEX_THEME = Theme({
    "info": "bold cyan",
    "warning": "bold yellow",
    "error": "bold red",
    "success": "bold green",
    "path": "bold cyan",
    "dim": "dim white",
})

# Single console instance - import this, don't create your own
console = Console(
    theme=INDEX_THEME,
    force_terminal=sys.stdout.isatty()
)


def print_header(title: str) -> None:
    """Print a styled section header with horizontal rules."""
    console.rule(f"[bold]{title}[/bold]")


def print_success(msg: str) -> None:
    """Print a success message in green."""
    console.print(f"[success]OK:[/success] {msg}")
