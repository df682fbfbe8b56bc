"""On-disk store of converted slide decks.

Storage layout::

    {root}/{slug}/metadata.json
    {root}/{slug}/images/page-001.webp
    {root}/{slug}/images/page-002.webp
    ...

A deck becomes visible only once ``metadata.json`` exists, and that file is
written after every page image is on disk.  Directories without a readable
record are treated as in-progress or foreign and skipped by ``list_all``.

Slug allocation is a check-then-act step: concurrent imports into the same
store must be serialized by the caller.
"""

from __future__ import annotations

import json
import logging
import os
import shutil
from collections.abc import Callable, Mapping
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from slidef.core.errors import (
    DuplicateNameError,
    NotFoundError,
    PageRenderError,
    ValidationError,
)
from slidef.core.hasher import sha256_hex
from slidef.core.rasterizer import open_document, page_filename, render
from slidef.core.slugs import allocate_slug
from slidef.models.slides import (
    ImageFormat,
    RenderOptions,
    SlideMetadata,
    describe_validation_error,
)

logger = logging.getLogger(__name__)

METADATA_FILENAME = "metadata.json"
IMAGES_DIRNAME = "images"

# Fields fixed at conversion time; edits may only touch descriptive fields.
_IMMUTABLE_FIELDS = frozenset({"name", "pageCount", "sha256", "format"})

Renderer = Callable[[bytes, Path, RenderOptions], int]


class SlideStore:
    """Creates, reads, edits and deletes slide decks under one root.

    Parameters
    ----------
    root:
        The slides directory.  Created if missing.
    renderer:
        The rasterization function; defaults to ``slidef.core.rasterizer.render``.
    """

    def __init__(self, root: Path | str, *, renderer: Renderer = render) -> None:
        self._root = Path(root)
        self._root.mkdir(parents=True, exist_ok=True)
        self._renderer = renderer

    @property
    def root(self) -> Path:
        return self._root

    def deck_dir(self, slug: str) -> Path:
        """Directory of a deck.  Rejects slugs that would escape the root."""
        if (
            not slug
            or slug in (".", "..")
            or slug.startswith(".")
            or "/" in slug
            or "\\" in slug
        ):
            raise ValidationError(f"Invalid slide name: {slug!r}")
        return self._root / slug

    def images_dir(self, slug: str) -> Path:
        return self.deck_dir(slug) / IMAGES_DIRNAME

    def existing_slugs(self) -> set[str]:
        """Names of every directory in the store, finished or not."""
        return {p.name for p in self._root.iterdir() if p.is_dir()}

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(
        self,
        source: bytes,
        *,
        name: str,
        options: RenderOptions | None = None,
        title: str | None = None,
        description: str | None = None,
        filename: str | None = None,
        created_at: date | None = None,
    ) -> SlideMetadata:
        """Convert *source* into a new deck named after *name*.

        The slug is derived from *name* and made unique against the decks
        currently on disk.  A document that cannot be opened is rejected
        before anything is written.  On a later conversion error the
        partially written deck directory is left in place; the error's
        ``output_dir`` points at its images directory.
        """
        options = options or RenderOptions()
        digest = sha256_hex(source)

        # Reject unreadable documents before a slug directory is claimed.
        open_document(source).close()

        slug = allocate_slug(name, self.existing_slugs())
        deck_dir = self._root / slug
        try:
            deck_dir.mkdir()
        except FileExistsError as exc:
            raise DuplicateNameError(
                f"Slide deck {slug!r} was created by a concurrent import"
            ) from exc

        images_dir = deck_dir / IMAGES_DIRNAME
        logger.info("Converting %r into %s", name, deck_dir)
        count = self._renderer(source, images_dir, options)

        missing = _missing_pages(images_dir, count, options.format)
        if missing:
            raise PageRenderError(
                f"Page images missing after conversion: {missing}",
                page=missing[0],
                output_dir=images_dir,
            )

        metadata = SlideMetadata(
            name=slug,
            title=title,
            filename=filename,
            page_count=count,
            created_at=created_at or date.today(),
            sha256=digest,
            description=description,
            format=options.format,
        )
        _write_metadata(deck_dir, metadata)
        logger.info("Imported %s (%d pages)", slug, count)
        return metadata

    def import_file(
        self,
        path: Path | str,
        *,
        name: str | None = None,
        **kwargs: Any,
    ) -> SlideMetadata:
        """Read a PDF from disk and ``create`` a deck from it.

        The deck is named after the file stem unless *name* is given.
        """
        path = Path(path)
        if not path.is_file():
            raise NotFoundError(f"PDF file not found: {path}")
        return self.create(
            path.read_bytes(),
            name=name or path.stem,
            filename=path.name,
            **kwargs,
        )

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get(self, slug: str) -> SlideMetadata:
        metadata = _read_metadata(self.deck_dir(slug))
        if metadata is None:
            raise NotFoundError(f"Slide deck not found: {slug}")
        return metadata

    def exists(self, slug: str) -> bool:
        return _read_metadata(self.deck_dir(slug)) is not None

    def list_all(self) -> list[SlideMetadata]:
        """Every deck with a valid metadata record, ordered by slug."""
        decks: list[SlideMetadata] = []
        for entry in sorted(self._root.iterdir()):
            if not entry.is_dir() or entry.name.startswith("."):
                continue
            metadata = _read_metadata(entry)
            if metadata is None:
                logger.debug("Skipping %s: no valid %s", entry, METADATA_FILENAME)
                continue
            decks.append(metadata)
        return decks

    def image_paths(self, slug: str) -> list[Path]:
        """Page images of a deck in page order."""
        metadata = self.get(slug)
        images_dir = self.images_dir(slug)
        return sorted(images_dir.glob(f"page-*.{_extension(metadata)}"))

    # ------------------------------------------------------------------
    # Update and remove
    # ------------------------------------------------------------------

    def update(self, slug: str, changes: Mapping[str, Any]) -> SlideMetadata:
        """Merge *changes* over the stored record and rewrite it.

        Keys may use either the record's camelCase names or the model's
        field names.  Identity fields (name, page count, digest, format)
        cannot be edited.
        """
        current = self.get(slug)
        changes = _record_keys(changes)

        locked = sorted(_IMMUTABLE_FIELDS.intersection(changes))
        if locked:
            raise ValidationError(f"Fields cannot be edited: {', '.join(locked)}")

        merged = {**current.to_record(), **changes}
        try:
            updated = SlideMetadata.model_validate(merged)
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Invalid metadata for {slug}: {describe_validation_error(exc)}"
            ) from exc

        _write_metadata(self.deck_dir(slug), updated)
        logger.info("Updated metadata for %s", slug)
        return updated

    def remove(self, slug: str) -> None:
        """Delete a deck directory recursively.  Missing decks are a no-op."""
        deck_dir = self.deck_dir(slug)
        if not deck_dir.exists():
            logger.debug("Nothing to remove for %s", slug)
            return
        shutil.rmtree(deck_dir)
        logger.info("Removed %s", slug)


# ----------------------------------------------------------------------
# Helpers
# ----------------------------------------------------------------------


def _record_keys(changes: Mapping[str, Any]) -> dict[str, Any]:
    """Rename model field names (``created_at``) to record keys (``createdAt``)."""
    fields = SlideMetadata.model_fields
    return {
        (fields[key].alias or key) if key in fields else key: value
        for key, value in changes.items()
    }


def _extension(metadata: SlideMetadata) -> str:
    return metadata.format.extension if metadata.format else "*"


def _missing_pages(images_dir: Path, count: int, fmt: ImageFormat) -> list[int]:
    return [
        n for n in range(1, count + 1)
        if not (images_dir / page_filename(n, fmt)).is_file()
    ]


def _read_metadata(deck_dir: Path) -> SlideMetadata | None:
    path = deck_dir / METADATA_FILENAME
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        return SlideMetadata.model_validate(raw)
    except FileNotFoundError:
        return None
    except (json.JSONDecodeError, PydanticValidationError, UnicodeDecodeError) as exc:
        logger.debug("Unreadable metadata at %s: %s", path, exc)
        return None


def _write_metadata(deck_dir: Path, metadata: SlideMetadata) -> None:
    """Write the record through a temp file so readers never see half of it."""
    target = deck_dir / METADATA_FILENAME
    tmp = deck_dir / f".{METADATA_FILENAME}.tmp"
    tmp.write_text(
        json.dumps(metadata.to_record(), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    os.replace(tmp, target)
