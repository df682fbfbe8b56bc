"""Slidef: PDF slide decks as browsable static image sequences.

Core pipeline:
  - SHA-256 content fingerprints of imported PDFs
  - Unique, URL-safe slide names
  - Page rasterization to PNG, JPEG or WebP via PyMuPDF + Pillow
  - On-disk slide store with metadata records and a rebuilt-on-publish index
  - Live-reload notifications for the development server
"""

__version__ = "0.3.0"

from slidef.core.slide_store import SlideStore
from slidef.core.slugs import allocate_slug
from slidef.core.rasterizer import render

__all__ = ["SlideStore", "allocate_slug", "render", "__version__"]
