"""Error taxonomy for the conversion and artifact-management core.

Every error carries a machine-distinguishable ``kind`` alongside its
human-readable message.  File system failures are not wrapped: they
propagate as the built-in ``OSError``.
"""

from __future__ import annotations

from pathlib import Path
from typing import ClassVar


class SlidefError(RuntimeError):
    """Base class for all slidef errors."""

    kind: ClassVar[str] = "slidef"


class NotFoundError(SlidefError):
    """Raised when a slide deck, image or config file does not exist."""

    kind = "not_found"


class ValidationError(SlidefError):
    """Raised when options or metadata fields are out of range.

    Always raised before any side effect takes place.
    """

    kind = "validation"


class ConversionError(SlidefError):
    """Base for failures that abort a conversion.

    ``output_dir`` is the directory the conversion was writing to.  It is
    never cleaned up here; callers decide whether to remove it.
    """

    kind = "conversion"

    def __init__(self, message: str, *, output_dir: Path | None = None) -> None:
        super().__init__(message)
        self.output_dir = output_dir


class DocumentParseError(ConversionError):
    """Raised when the source bytes cannot be opened as a PDF document."""

    kind = "document_parse"


class PageRenderError(ConversionError):
    """Raised when a single page fails to rasterize mid-conversion."""

    kind = "page_render"

    def __init__(
        self, message: str, *, page: int, output_dir: Path | None = None
    ) -> None:
        super().__init__(message, output_dir=output_dir)
        self.page = page


class DuplicateNameError(SlidefError):
    """Raised when an allocated slug is claimed by someone else first.

    Only reachable when two imports race on the same store.
    """

    kind = "duplicate_name"
