"""Slide deck models: render options, per-deck metadata and the index."""

from __future__ import annotations

from datetime import date, datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from slidef.core.errors import ValidationError


class ImageFormat(str, Enum):
    """Raster formats a page can be encoded as."""

    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"

    @property
    def extension(self) -> str:
        """File extension for this format (``jpeg`` is written as ``.jpg``)."""
        return "jpg" if self is ImageFormat.JPEG else self.value

    @property
    def is_lossy(self) -> bool:
        return self is not ImageFormat.PNG


def describe_validation_error(exc: PydanticValidationError) -> str:
    """Flatten a pydantic error into a one-line message."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "value"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


class RenderOptions(BaseModel):
    """Validated rasterization options.

    ``quality`` is only honoured by the lossy formats and is ignored for PNG.
    """

    model_config = ConfigDict(frozen=True)

    scale: float = Field(default=2.0, gt=0, allow_inf_nan=False)
    format: ImageFormat = ImageFormat.WEBP
    quality: int = Field(default=85, ge=0, le=100)

    @classmethod
    def from_values(cls, **values: Any) -> RenderOptions:
        """Build options from loose values, dropping ``None`` entries.

        Raises ``slidef.core.errors.ValidationError`` on any bad value.
        """
        try:
            return cls(**{k: v for k, v in values.items() if v is not None})
        except PydanticValidationError as exc:
            raise ValidationError(
                f"Invalid render options: {describe_validation_error(exc)}"
            ) from exc


class SlideMetadata(BaseModel):
    """The ``metadata.json`` record stored next to a deck's images.

    Keys use camelCase on disk.  Unknown keys are kept so that manual edits
    to the record survive an update.
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    name: str
    title: str | None = None
    filename: str | None = None
    page_count: int = Field(alias="pageCount", gt=0)
    created_at: date = Field(alias="createdAt")
    sha256: str = Field(pattern=r"^[0-9a-f]{64}$")
    description: str | None = None
    format: ImageFormat | None = None

    def to_record(self) -> dict[str, Any]:
        """JSON-ready dict in the on-disk layout."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SlideIndex(BaseModel):
    """Published index of every deck in a store, rebuilt from scratch."""

    model_config = ConfigDict(populate_by_name=True)

    slides: list[SlideMetadata]
    updated_at: datetime = Field(
        alias="updatedAt",
        default_factory=lambda: datetime.now(timezone.utc),
    )

    def to_record(self) -> dict[str, Any]:
        return {
            "slides": [s.to_record() for s in self.slides],
            "updatedAt": self.updated_at.isoformat().replace("+00:00", "Z"),
        }
