"""``slidef list``: show the slide decks in the store."""

from __future__ import annotations

from pathlib import Path

from rich.console import Console
from rich.table import Table

from slidef.core.project import load_project_config, resolve_dir
from slidef.core.slide_store import SlideStore

console = Console()


def list_cmd() -> None:
    """List all slide decks."""
    cwd = Path.cwd()
    config = load_project_config(cwd)
    slides_dir = resolve_dir(cwd, config.slides_dir)

    if not slides_dir.is_dir():
        console.print("[yellow]No slides directory found.[/yellow]")
        console.print('[dim]Run "slidef import <pdf>" to import your first slide deck.[/dim]')
        return

    slides = SlideStore(slides_dir).list_all()
    if not slides:
        console.print("[yellow]No slide decks found.[/yellow]")
        console.print('[dim]Run "slidef import <pdf>" to import your first slide deck.[/dim]')
        return

    table = Table(title=f"Slide Decks ({len(slides)})")
    table.add_column("Name", style="cyan")
    table.add_column("Pages", justify="right")
    table.add_column("Created")
    table.add_column("Title")

    for slide in slides:
        table.add_row(
            slide.name,
            str(slide.page_count),
            slide.created_at.isoformat(),
            slide.title or "",
        )

    console.print(table)
