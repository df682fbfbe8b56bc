"""``slidef remove``: delete a slide deck."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from slidef.core.errors import SlidefError
from slidef.core.project import load_project_config, resolve_dir
from slidef.core.slide_store import SlideStore

console = Console()


def remove_cmd(
    slide_name: str = typer.Argument(..., help="Name of the slide deck to remove."),
) -> None:
    """Remove a slide deck and all of its images."""
    cwd = Path.cwd()
    config = load_project_config(cwd)
    store = SlideStore(resolve_dir(cwd, config.slides_dir))

    try:
        deck_dir = store.deck_dir(slide_name)
    except SlidefError as exc:
        console.print(f"[red]{exc}[/red]")
        raise typer.Exit(code=1) from exc

    # The store treats a missing deck as a no-op; the CLI still tells the
    # user about the likely typo.
    if not deck_dir.exists():
        console.print(f"[red]Slide deck not found:[/red] {slide_name}")
        console.print('[dim]Run "slidef list" to see available slide decks.[/dim]')
        raise typer.Exit(code=1)

    store.remove(slide_name)
    console.print(f"[green]Removed slide deck:[/green] [cyan]{slide_name}[/cyan]")
