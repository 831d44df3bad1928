# core/config.py
"""
Process-wide settings for the operations console.

Values come from the environment (prefix ``CONSOLE_``) or a local ``.env``
file.  The engine itself never reads settings directly; only the wiring layer
(backend client construction, overlay loading, ``run_editor.py``) does.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root – one level up from ``core/``
PROJECT_ROOT = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    """Console settings (backend endpoint, transport limits, logging)."""

    PROJECT_NAME: str = "Crawl Operations Console"

    # ------------------------------------------------------------------
    # Backend transport
    # ------------------------------------------------------------------
    API_BASE_URL: str = "http://localhost:5000/api"
    API_TOKEN: Optional[str] = None
    TIMEOUT: float = Field(default=10.0, gt=0)
    MAX_RETRIES: int = Field(default=3, ge=1)

    # ------------------------------------------------------------------
    # Engine data
    # ------------------------------------------------------------------
    OVERLAYS_PATH: Path = PROJECT_ROOT / "configs" / "overlays.yaml"
    ACTOR_ID_PATTERN: str = r"^[0-9a-fA-F]{24}$"

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="CONSOLE_",
        env_file=".env",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
