"""Slidef CLI: Typer-based command-line interface.

Provides the ``slidef`` command with subcommands for importing PDFs,
listing and removing slide decks, publishing the static site and running
the development server.

All output uses Rich for formatted terminal display.
"""
