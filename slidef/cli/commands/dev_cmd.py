"""``slidef dev``: run the development server with live reload."""

from __future__ import annotations

from pathlib import Path

import typer
import uvicorn
from rich.console import Console

from slidef.config import settings
from slidef.server.app import create_app

console = Console()


def dev_cmd(
    port: int = typer.Option(None, "--port", "-p", help="Port number."),
    slides: Path = typer.Option(None, "--slides", "-s", help="Slides directory."),
) -> None:
    """Start the development server."""
    app = create_app(Path.cwd(), slides_dir=slides)
    port = port or settings.port

    console.print(f"[cyan]  Local:   http://{settings.host}:{port}[/cyan]")
    console.print("[dim]  Press Ctrl+C to stop[/dim]")
    uvicorn.run(app, host=settings.host, port=port, log_level=settings.log_level.lower())
