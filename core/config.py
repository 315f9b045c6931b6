"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for Glyph DB happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.
(The NO_COLOR / FORCE_COLOR terminal conventions in core/formatter.py are the
one exception: they are cross-tool standards, not application settings.)

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. data_dir -> DATA_DIR). Type coercion and validation are built in.

Layer rule: core/ is the kernel. This module may not import from snapshot/.
"""

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("glyph.config")

_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    All fields have defaults so Settings() can be instantiated in test
    environments without a real .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    data_dir: Path = Path(".")
    assemblies_file: str = "ASM.json"
    drives_file: str = "DWE.json"
    tickets_file: str = "ZEN.json"

    # ------------------------------------------------------------------
    # Search and summary
    # ------------------------------------------------------------------

    max_results: int = Field(default=25, gt=0)
    top_n: int = Field(default=15, gt=0)
    # Top manufacturers that act as parent names for color grouping.
    parent_reference_size: int = Field(default=10, gt=0)

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    log_level: str = "WARNING"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(_LOG_LEVELS)}; got {value!r}")
        return level

    def snapshot_path(self, filename: str) -> Path:
        return self.data_dir / filename


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    return Settings()
