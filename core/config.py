"""
Configuration for the Code Compiler backend.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=8000)
    DEBUG: bool = Field(default=False)
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(default="INFO")

    # Judge0 (RapidAPI hosted CE by default)
    JUDGE0_URL: str = Field(default="https://judge0-ce.p.rapidapi.com")
    JUDGE0_API_KEY: str = Field(default="")
    JUDGE0_API_HOST: str = Field(default="judge0-ce.p.rapidapi.com")
    JUDGE0_TIMEOUT: float = Field(default=30.0)
    JUDGE0_POLL_INTERVAL: float = Field(default=1.0)
    JUDGE0_MAX_POLLS: int = Field(default=30)

    # Request limits
    MAX_CODE_LENGTH: int = Field(default=50_000)
    MAX_STDIN_LENGTH: int = Field(default=65_536)


@lru_cache()
def get_settings() -> Settings:
    return Settings()


settings = get_settings()


# Logging setup
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL),
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logging.getLogger("httpx").setLevel(logging.WARNING)

logger = logging.getLogger("code-compiler")
