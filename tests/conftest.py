"""Shared test fixtures for slidef."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import fitz  # PyMuPDF
import pytest

from slidef.core.slide_store import SlideStore
from slidef.models.slides import ImageFormat, RenderOptions


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test output."""
    return tmp_path


@pytest.fixture
def make_pdf() -> Callable[..., bytes]:
    """Factory fixture: build an in-memory PDF with numbered pages."""

    def _factory(pages: int = 3, width: float = 200, height: float = 150) -> bytes:
        doc = fitz.open()
        for i in range(pages):
            page = doc.new_page(width=width, height=height)
            page.insert_text((20, 40), f"Slide {i + 1}", fontsize=18)
        data = doc.tobytes()
        doc.close()
        return data

    return _factory


@pytest.fixture
def pdf_bytes(make_pdf: Callable[..., bytes]) -> bytes:
    """Convenience: a ready-made three-page PDF."""
    return make_pdf()


@pytest.fixture
def pdf_file(tmp_dir: Path, pdf_bytes: bytes) -> Path:
    """A three-page PDF written to disk as ``My Talk.pdf``."""
    path = tmp_dir / "My Talk.pdf"
    path.write_bytes(pdf_bytes)
    return path


@pytest.fixture
def png_options() -> RenderOptions:
    """Small, fast PNG output."""
    return RenderOptions(scale=1, format=ImageFormat.PNG)


@pytest.fixture
def store(tmp_dir: Path) -> SlideStore:
    """Provide a fresh SlideStore in a temp directory."""
    return SlideStore(tmp_dir / "slides")
