# jobboard/config.py

from __future__ import annotations
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional

class Settings(BaseSettings):
    # --- Core ---
    JWT_SECRET: str = Field(..., min_length=1, description="JWT signing key")
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = Field(60, ge=1, le=60 * 24)
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # --- Database ---
    DATABASE_URL: str = Field("sqlite:///./jobboard.db")
    # Alembic reads DATABASE_URL from env directly, see migrations/env.py.

    # --- External job search (enrichment path, optional) ---
    JOB_SEARCH_API_URL: Optional[str] = None
    JOB_INFO_API_URL: Optional[str] = None
    JOB_SEARCH_API_KEY: Optional[str] = None
    JOB_SEARCH_TIMEOUT_SECONDS: float = Field(10.0, gt=0, le=120)

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def job_search_enabled(self) -> bool:
        return bool(self.JOB_SEARCH_API_URL)

    @property
    def job_info_enabled(self) -> bool:
        return bool(self.JOB_INFO_API_URL)


def load_settings(**overrides) -> Settings:
    """Build settings from the environment, with explicit overrides on top."""
    return Settings(**overrides)
