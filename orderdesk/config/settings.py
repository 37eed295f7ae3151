"""
Runtime configuration, read from the environment and an optional ``.env`` file.

Each section has its own prefix: ``STORAGE_``, ``RECON_`` and ``API_``.
"""

from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

AllocationOrder = Literal["insertion", "oldest_first"]


class StorageSettings(BaseSettings):
    """Where the SQLite database lives and how it is pooled."""

    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "orderdesk.db"
    pool_size: int = Field(default=5, ge=1)
    busy_timeout: int = Field(default=30000, ge=0, description="milliseconds")

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class ReconciliationSettings(BaseSettings):
    """Exchange and return processing."""

    model_config = SettingsConfigDict(env_prefix="RECON_")

    # a lost race reloads and replays the whole operation
    max_commit_attempts: int = Field(default=3, ge=1)
    retry_delay: float = Field(default=0.05, ge=0)

    # insertion: stock admission order (seq); oldest_first: created_at
    allocation_order: AllocationOrder = "insertion"

    currency_symbol: str = "৳"


class APISettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]


class Settings(BaseSettings):
    """Top-level settings; sections are built from their own prefixes."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "orderdesk"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    storage: StorageSettings = Field(default_factory=StorageSettings)
    reconciliation: ReconciliationSettings = Field(default_factory=ReconciliationSettings)
    api: APISettings = Field(default_factory=APISettings)

    @field_validator("storage", mode="after")
    @classmethod
    def create_data_dir(cls, storage: StorageSettings) -> StorageSettings:
        storage.data_dir.mkdir(parents=True, exist_ok=True)
        return storage


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
