"""
Environment-based configuration using pydantic-settings.
Every value can be overridden from the environment or a .env file.
"""
import tempfile
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
    )

    # ── Core ────────────────────────────────────────────────────────────────
    ENV: str = "production"
    LOG_LEVEL: str = "INFO"

    # ── Storage ─────────────────────────────────────────────────────────────
    TEMP_DIR: Path = Path(tempfile.gettempdir()) / "audio_cache"

    # ── Bundled assets ──────────────────────────────────────────────────────
    ASSET_PREFIX: str = ""                 # prepended to bundle names, e.g. "audio/"
    ASSET_PACKAGE: Optional[str] = None    # importable package holding the assets
    ASSET_DIR: Path = Path("assets")       # used when ASSET_PACKAGE is unset

    # ── HTTP client ──────────────────────────────────────────────────────────
    HTTP_TIMEOUT_SECONDS: int = 300
    HTTP_MAX_REDIRECTS: int = 10

    # ── Playback ─────────────────────────────────────────────────────────────
    FFPLAY_PATH: str = "ffplay"

    @field_validator("TEMP_DIR", mode="before")
    @classmethod
    def ensure_temp_dir(cls, v: Path) -> Path:
        path = Path(v)
        path.mkdir(parents=True, exist_ok=True)
        return path


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
