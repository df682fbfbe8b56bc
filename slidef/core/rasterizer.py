"""PDF page rasterization via PyMuPDF and Pillow.

Each page is rendered at ``scale`` times its intrinsic size (72 dpi = 1.0),
encoded in the requested format and written as
``<output_dir>/page-NNN.<ext>``.  Pages are rendered strictly one after the
other; a page's pixmap and image are released before the next page starts.

A conversion that fails part-way leaves the pages it already wrote on
disk.  The raised error carries ``output_dir`` and the caller decides
whether to remove it.
"""

from __future__ import annotations

import logging
from pathlib import Path

import fitz  # PyMuPDF
from PIL import Image

from slidef.core.errors import DocumentParseError, PageRenderError
from slidef.models.slides import ImageFormat, RenderOptions

logger = logging.getLogger(__name__)

PAGE_PREFIX = "page-"

_PIL_FORMATS: dict[ImageFormat, str] = {
    ImageFormat.PNG: "PNG",
    ImageFormat.JPEG: "JPEG",
    ImageFormat.WEBP: "WEBP",
}


def page_filename(page_number: int, fmt: ImageFormat) -> str:
    """File name for a 1-based page number, e.g. ``page-007.webp``."""
    return f"{PAGE_PREFIX}{page_number:03d}.{fmt.extension}"


def open_document(source: bytes, *, output_dir: Path | None = None) -> fitz.Document:
    """Open PDF bytes, raising ``DocumentParseError`` if they are unusable."""
    try:
        doc = fitz.open(stream=source, filetype="pdf")
    except (RuntimeError, ValueError) as exc:
        raise DocumentParseError(
            f"Could not parse PDF document: {exc}", output_dir=output_dir
        ) from exc

    if doc.needs_pass:
        doc.close()
        raise DocumentParseError(
            "PDF document is encrypted", output_dir=output_dir
        )
    if doc.page_count < 1:
        doc.close()
        raise DocumentParseError(
            "PDF document has no pages", output_dir=output_dir
        )
    return doc


def page_count(source: bytes) -> int:
    """Return the number of pages without rendering anything."""
    doc = open_document(source)
    try:
        return doc.page_count
    finally:
        doc.close()


def render(
    source: bytes,
    output_dir: Path | str,
    options: RenderOptions | None = None,
) -> int:
    """Rasterize every page of *source* into *output_dir*.

    Returns the page count.  Nothing is written if the document cannot be
    opened.  *output_dir* is created on demand.

    Raises
    ------
    DocumentParseError
        The bytes are not a readable, unencrypted, non-empty PDF.
    PageRenderError
        A page failed to render; earlier pages remain on disk.
    """
    options = options or RenderOptions()
    output_dir = Path(output_dir)

    doc = open_document(source, output_dir=output_dir)
    try:
        total = doc.page_count
        logger.debug(
            "Rendering %d pages at scale %.2f as %s",
            total,
            options.scale,
            options.format.value,
        )
        output_dir.mkdir(parents=True, exist_ok=True)
        matrix = fitz.Matrix(options.scale, options.scale)

        for index in range(total):
            page_number = index + 1
            target = output_dir / page_filename(page_number, options.format)
            _render_page(doc, index, matrix, options, target)
            logger.debug("Page %d/%d -> %s", page_number, total, target.name)
    finally:
        doc.close()

    return total


def _render_page(
    doc: fitz.Document,
    index: int,
    matrix: fitz.Matrix,
    options: RenderOptions,
    target: Path,
) -> None:
    page_number = index + 1
    try:
        page = doc.load_page(index)
        pix = page.get_pixmap(matrix=matrix, alpha=False)
        image = Image.frombytes("RGB", (pix.width, pix.height), pix.samples)
    except (RuntimeError, ValueError) as exc:
        raise PageRenderError(
            f"Failed to render page {page_number}: {exc}",
            page=page_number,
            output_dir=target.parent,
        ) from exc

    # Drop the pixmap before encoding so only one raster buffer is alive.
    pix = None
    save_kwargs: dict[str, int] = {}
    if options.format.is_lossy:
        save_kwargs["quality"] = options.quality
    try:
        with image:
            image.save(target, format=_PIL_FORMATS[options.format], **save_kwargs)
    except (OSError, ValueError, KeyError) as exc:
        raise PageRenderError(
            f"Failed to write page {page_number}: {exc}",
            page=page_number,
            output_dir=target.parent,
        ) from exc
