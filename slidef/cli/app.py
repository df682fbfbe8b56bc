"""Main Typer application: imports and registers all CLI commands.

Entry point: ``slidef`` (configured via pyproject.toml [project.scripts]).
"""

from __future__ import annotations

import logging

import typer
from rich.logging import RichHandler

from slidef.cli.commands.dev_cmd import dev_cmd
from slidef.cli.commands.import_cmd import import_cmd
from slidef.cli.commands.list_cmd import list_cmd
from slidef.cli.commands.publish_cmd import publish_cmd
from slidef.cli.commands.remove_cmd import remove_cmd
from slidef.config import settings

app = typer.Typer(
    name="slidef",
    help="Slidef: convert PDF slides into a browsable static site.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def _configure(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging."),
) -> None:
    level = logging.DEBUG if verbose else settings.log_level.upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(rich_tracebacks=True, show_path=False)],
    )


# Register subcommands
app.command(name="import", help="Import a PDF file as a slide deck.")(import_cmd)
app.command(name="list", help="List all slide decks.")(list_cmd)
app.command(name="remove", help="Remove a slide deck.")(remove_cmd)
app.command(name="publish", help="Generate the static site for all slides.")(publish_cmd)
app.command(name="dev", help="Start the development server with live reload.")(dev_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
