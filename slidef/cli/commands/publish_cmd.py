"""``slidef publish``: write the static site tree."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from slidef.core.project import load_project_config, resolve_dir
from slidef.core.publisher import publish
from slidef.core.slide_store import SlideStore

console = Console()


def publish_cmd(
    output: Path = typer.Option(
        None, "--output", "-o", help="Output directory (defaults to config publishDir)."
    ),
    slides: Path = typer.Option(
        None, "--slides", "-s", help="Slides directory (defaults to config slidesDir)."
    ),
) -> None:
    """Generate the slide index and copy every deck into the publish directory."""
    cwd = Path.cwd()
    config = load_project_config(cwd)
    store = SlideStore(resolve_dir(cwd, config.slides_dir, slides))

    if not store.list_all():
        console.print("[yellow]No slides found to publish.[/yellow]")
        console.print('[dim]Run "slidef import <pdf-file>" to add slides first.[/dim]')
        return

    result = publish(store, resolve_dir(cwd, config.publish_dir, output), config)

    console.print(
        f"[green]Published {len(result.slide_names)} slide deck(s)[/green] "
        f"to [cyan]{result.output_dir}[/cyan]"
    )
    console.print(f"[dim]  {result.index_path.name}[/dim]")
    if result.theme_path is not None:
        console.print(f"[dim]  {result.theme_path.name}[/dim]")
    console.print("[dim]  slides/[/dim]")
