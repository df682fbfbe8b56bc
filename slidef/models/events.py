"""Live-reload event models."""

from __future__ import annotations

import json
from enum import Enum

from pydantic import BaseModel, ConfigDict


class ChangeKind(str, Enum):
    """Classification of a stabilized filesystem change."""

    ADDED = "added"
    CHANGED = "changed"
    REMOVED = "removed"

    @property
    def reason(self) -> str:
        """The ``reason`` string sent to viewers, e.g. ``file-changed``."""
        return f"file-{self.value}"


class ChangeEvent(BaseModel):
    """A coalesced change to one path, relative to the project root."""

    model_config = ConfigDict(frozen=True)

    kind: ChangeKind
    path: str


class LiveReloadEvent(BaseModel):
    """A message pushed to live-reload subscribers."""

    model_config = ConfigDict(frozen=True)

    type: str
    reason: str | None = None
    file: str | None = None

    @classmethod
    def connected(cls) -> LiveReloadEvent:
        return cls(type="connected")

    @classmethod
    def reload(cls, change: ChangeEvent) -> LiveReloadEvent:
        return cls(type="reload", reason=change.kind.reason, file=change.path)

    def to_json(self) -> str:
        """Compact JSON without the unset optional fields."""
        return json.dumps(
            self.model_dump(exclude_none=True), separators=(",", ":")
        )
