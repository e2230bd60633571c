"""Runtime settings for arxiv_linker.

Values come from environment variables prefixed with ``ARXIV_LINKER_``
(e.g. ``ARXIV_LINKER_DB_PATH``) or a local ``.env`` file. CLI flags take
precedence over anything loaded here.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# maximum number of values a single "key in values" store query may carry
MAX_IN_QUERY_VALUES = 10


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="ARXIV_LINKER_", env_file=".env", extra="ignore")

    db_path: Optional[str] = None
    user: str = "anonymous"
    http_timeout: float = 30.0
    retry_attempts: int = Field(default=3, ge=1)
    chunk_size: int = Field(default=MAX_IN_QUERY_VALUES, ge=1, le=MAX_IN_QUERY_VALUES)
    concurrency: int = Field(default=3, ge=1)
    log_level: str = "WARNING"


@lru_cache
def get_settings() -> Settings:
    return Settings()
