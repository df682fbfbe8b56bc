"""``slidef import``: convert a PDF into a slide deck."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel

from slidef.core.errors import ConversionError, SlidefError
from slidef.core.project import load_project_config, resolve_dir
from slidef.core.slide_store import SlideStore
from slidef.models.slides import RenderOptions

console = Console()


def import_cmd(
    pdf_file: Path = typer.Argument(..., help="PDF file path to import."),
    name: str = typer.Option(
        None, "--name", "-n", help="Slide name (defaults to the PDF filename)."
    ),
    scale: float = typer.Option(
        2.0, "--scale", "-s", help="Scale factor for image resolution."
    ),
    image_format: str = typer.Option(
        "webp", "--format", "-f", help="Image format: png, jpeg, or webp."
    ),
    quality: int = typer.Option(85, "--quality", "-q", help="Image quality (0-100)."),
    title: str = typer.Option(None, "--title", "-t", help="Display title."),
) -> None:
    """Import a PDF file as a slide deck."""
    cwd = Path.cwd()
    try:
        options = RenderOptions.from_values(
            scale=scale, format=image_format, quality=quality
        )
        config = load_project_config(cwd)
        store = SlideStore(resolve_dir(cwd, config.slides_dir))
        with console.status(f"Converting [cyan]{pdf_file}[/cyan] to images..."):
            metadata = store.import_file(
                pdf_file, name=name, options=options, title=title
            )
    except ConversionError as exc:
        if exc.output_dir is not None:
            store.remove(exc.output_dir.parent.name)
        console.print(f"[red]Import failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc
    except SlidefError as exc:
        console.print(f"[red]Import failed:[/red] {exc}")
        raise typer.Exit(code=1) from exc

    deck_dir = store.deck_dir(metadata.name)
    ext = options.format.extension
    console.print(
        Panel(
            "\n".join([
                f"[bold green]Imported {metadata.page_count} pages[/bold green]",
                "",
                f"[bold]Name:[/bold]    {metadata.name}",
                f"[bold]SHA-256:[/bold] {metadata.sha256}",
                "",
                f"[dim]{deck_dir}/[/dim]",
                f"[dim]  images/page-001.{ext} ...[/dim]",
                "[dim]  metadata.json[/dim]",
            ]),
            title="[bold]Slidef[/bold]",
            border_style="green",
            padding=(1, 2),
        )
    )
