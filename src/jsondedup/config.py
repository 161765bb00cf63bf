"""Configuration via pydantic-settings — 12-factor app style."""
from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings

from .document.parser import DEFAULT_MAX_DEPTH


class Settings(BaseSettings):
    """jsondedup configuration — loaded from env vars / .env file."""

    workers: int = Field(default=1, ge=0, description="Worker processes for run (0 = cpu count)")
    chunk_size: int = Field(default=256, ge=1, description="Lines handed to a worker per task")
    max_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1, description="Deepest JSON nesting accepted")
    strict_escapes: bool = Field(default=False, description="Reject unknown TSV escape sequences")
    log_level: str = Field(default="WARNING", description="Log level for jsondedup loggers")

    class Config:
        env_prefix = "JSONDEDUP_"
        env_file = ".env"


settings = Settings()
