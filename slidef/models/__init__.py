"""Slidef data models: pydantic v2, camelCase on the wire."""

from slidef.models.config import ProjectConfig, ThemeConfig
from slidef.models.events import ChangeEvent, ChangeKind, LiveReloadEvent
from slidef.models.slides import (
    ImageFormat,
    RenderOptions,
    SlideIndex,
    SlideMetadata,
)

__all__ = [
    "ChangeEvent",
    "ChangeKind",
    "ImageFormat",
    "LiveReloadEvent",
    "ProjectConfig",
    "RenderOptions",
    "SlideIndex",
    "SlideMetadata",
    "ThemeConfig",
]
