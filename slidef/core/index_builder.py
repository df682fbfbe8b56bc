"""Published slide index: always rebuilt from a full store scan.

There is no incremental patching: each build is a fresh snapshot, so a
removed deck can never linger in the index.
"""

from __future__ import annotations

import json
from collections.abc import Iterable
from datetime import datetime, timezone
from pathlib import Path

from slidef.models.slides import SlideIndex, SlideMetadata

INDEX_FILENAME = "slides-index.json"


def build_index(
    slides: Iterable[SlideMetadata], *, now: datetime | None = None
) -> SlideIndex:
    """Wrap a snapshot of deck metadata with a fresh timestamp."""
    return SlideIndex(
        slides=list(slides),
        updated_at=now or datetime.now(timezone.utc),
    )


def write_index(index: SlideIndex, output_dir: Path | str) -> Path:
    """Write ``slides-index.json`` into *output_dir* and return its path."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / INDEX_FILENAME
    path.write_text(
        json.dumps(index.to_record(), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    return path
