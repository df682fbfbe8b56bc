"""Publish the slide store as a static site tree.

Output layout::

    {publish_dir}/slides-index.json
    {publish_dir}/theme.css            (only with a configured theme)
    {publish_dir}/slides/{slug}/...    (copy of each deck)
    {publish_dir}/{slug}/              (route directory per deck)

The viewer pages themselves are produced by the front-end bundle and are
not generated here.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from slidef.core.index_builder import build_index, write_index
from slidef.core.slide_store import SlideStore
from slidef.models.config import ProjectConfig, ThemeConfig

logger = logging.getLogger(__name__)

THEME_FILENAME = "theme.css"

# (theme attribute, CSS custom property)
_THEME_VARIABLES: tuple[tuple[str, str], ...] = (
    ("primary_color", "--primary-color"),
    ("background_color", "--bg-primary"),
    ("text_color", "--text-primary"),
    ("progress_color", "--progress-fill"),
    ("font_family", "--font-family"),
)


class PublishResult(BaseModel):
    """Summary of a publish run."""

    model_config = ConfigDict(frozen=True)

    output_dir: Path
    index_path: Path
    slide_names: list[str]
    theme_path: Path | None = None


def theme_styles(theme: ThemeConfig) -> str:
    """Render a theme as a ``:root`` block of CSS custom properties."""
    lines = [":root {"]
    for attr, variable in _THEME_VARIABLES:
        value = getattr(theme, attr)
        if value:
            lines.append(f"  {variable}: {value};")
    lines.append("}")
    if theme.font_family:
        lines.append(f"body {{ font-family: {theme.font_family}; }}")
    return "\n".join(lines) + "\n"


def publish(
    store: SlideStore, output_dir: Path | str, config: ProjectConfig
) -> PublishResult:
    """Rebuild the index and copy every valid deck into *output_dir*."""
    output_dir = Path(output_dir).resolve()
    output_dir.mkdir(parents=True, exist_ok=True)

    slides = store.list_all()
    index_path = write_index(build_index(slides), output_dir)
    logger.info("Wrote index with %d slide decks to %s", len(slides), index_path)

    slides_out = output_dir / "slides"
    if store.root.resolve() != slides_out:
        slides_out.mkdir(parents=True, exist_ok=True)
        for slide in slides:
            shutil.copytree(
                store.deck_dir(slide.name),
                slides_out / slide.name,
                dirs_exist_ok=True,
            )

    for slide in slides:
        (output_dir / slide.name).mkdir(exist_ok=True)

    theme_path = None
    if config.theme is not None:
        theme_path = output_dir / THEME_FILENAME
        theme_path.write_text(theme_styles(config.theme), encoding="utf-8")

    return PublishResult(
        output_dir=output_dir,
        index_path=index_path,
        slide_names=[s.name for s in slides],
        theme_path=theme_path,
    )
