"""Project configuration models (``slidef.config.json``)."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ThemeConfig(BaseModel):
    """Viewer theme overrides; every colour is optional."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    primary_color: str | None = Field(default=None, alias="primaryColor")
    background_color: str | None = Field(default=None, alias="backgroundColor")
    text_color: str | None = Field(default=None, alias="textColor")
    progress_color: str | None = Field(default=None, alias="progressColor")
    font_family: str | None = Field(default=None, alias="fontFamily")


class ProjectConfig(BaseModel):
    """Project-level settings loaded from the JSON config file.

    Loaded values are shallow-merged over these defaults.  Keys this model
    does not know about are preserved and written back unchanged.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    title: str = "Slide Presentations"
    subtitle: str = "View and manage your slide decks"
    base_url: str = Field(default="/", alias="baseUrl")
    publish_dir: str = Field(default="public", alias="publishDir")
    slides_dir: str = Field(default="slides", alias="slidesDir")
    theme: ThemeConfig | None = None

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
