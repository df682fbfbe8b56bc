"""Runtime settings: env-driven.

Centralized settings using pydantic-settings.  Reads from a ``.env`` file
and ``SLIDEF_*`` environment variables.  Project-level options (titles,
directories, theme) live in the JSON config file instead; see
``slidef.core.project``.
"""

from __future__ import annotations

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export SLIDEF_LOG_LEVEL=DEBUG
        export SLIDEF_PORT=8080
        export SLIDEF_STABILITY_WINDOW_MS=250
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="SLIDEF_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    config_filename: str = "slidef.config.json"

    # Development server
    host: str = "127.0.0.1"
    port: int = 3000

    # Live reload: quiet period before a write counts as finished
    stability_window_ms: int = 100
    templates_dir: Path | None = None

    @property
    def stability_window(self) -> float:
        """Stability window in seconds."""
        return self.stability_window_ms / 1000.0


# Module-level singleton: import as `from slidef.config import settings`
settings = Settings()
