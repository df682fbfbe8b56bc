"""Loading and saving the project config file.

A missing file means "all defaults".  Values found in the file are
shallow-merged over the defaults, and keys slidef does not recognise are
carried through untouched.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from slidef.config import settings
from slidef.core.errors import ValidationError
from slidef.models.config import ProjectConfig
from slidef.models.slides import describe_validation_error

logger = logging.getLogger(__name__)


def config_path(root: Path | str) -> Path:
    return Path(root) / settings.config_filename


def _read_raw(path: Path) -> dict[str, Any]:
    if not path.is_file():
        return {}
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValidationError(f"{path.name} is not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ValidationError(f"{path.name} must contain a JSON object")
    return raw


def _validate(raw: Mapping[str, Any], source: str) -> ProjectConfig:
    try:
        return ProjectConfig.model_validate(dict(raw))
    except PydanticValidationError as exc:
        raise ValidationError(
            f"Invalid config in {source}: {describe_validation_error(exc)}"
        ) from exc


def load_project_config(root: Path | str) -> ProjectConfig:
    """Return the project config under *root*, defaults if there is none."""
    path = config_path(root)
    return _validate(_read_raw(path), path.name)


def update_project_config(
    root: Path | str, changes: Mapping[str, Any]
) -> ProjectConfig:
    """Shallow-merge *changes* into the config file and rewrite it."""
    path = config_path(root)
    current = load_project_config(root).to_record()
    merged = _validate({**current, **changes}, path.name)
    path.write_text(
        json.dumps(merged.to_record(), indent=2, ensure_ascii=False) + "\n",
        encoding="utf-8",
    )
    logger.info("Updated %s", path)
    return merged


def resolve_dir(root: Path | str, configured: str, override: Path | str | None = None) -> Path:
    """Resolve a project directory, preferring an explicit override."""
    return (Path(root) / (override or configured)).resolve()
