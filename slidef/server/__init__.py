"""Starlette development server with live reload."""
