"""
Stockroom configuration.

One ``BaseSettings`` group per concern, each reading its own environment
prefix (``LLM_MODEL_NAME``, ``STORAGE_DATA_DIR``, ...). A ``.env`` file in
the working directory is read too.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LLMSettings(BaseSettings):
    """Completion provider used for AI invoice extraction."""

    model_config = SettingsConfigDict(env_prefix="LLM_")

    enabled: bool = True
    provider: Literal["openai", "ollama"] = "openai"
    base_url: str = "https://api.openai.com/v1"
    api_key: str = ""
    model_name: str = "gpt-4o-mini"
    timeout: int = Field(default=30, ge=1, le=300, description="Seconds per request")
    max_tokens: int = 1024
    temperature: float = Field(default=0.1, ge=0.0, le=2.0)

    # breaker opens after this many failed calls in a row
    failure_threshold: int = 3
    cooldown_seconds: int = 60

    max_retries: int = 2
    retry_delay: float = 1.0
    retry_multiplier: float = 2.0


class StorageSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="STORAGE_")

    data_dir: Path = Path("data")
    db_name: str = "stockroom.db"
    pool_size: int = Field(default=5, ge=1)
    busy_timeout: int = Field(default=30000, description="SQLite busy timeout in ms")

    @property
    def db_path(self) -> Path:
        return self.data_dir / self.db_name


class ParserSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="PARSER_")

    ai_enabled: bool = True
    vendor_scan_lines: int = 10
    # invoice text beyond this is cut before it goes into the prompt
    max_text_chars: int = 12000


class LedgerSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="LEDGER_")

    reverse_purchases_on_invoice_delete: bool = True


class APISettings(BaseSettings):
    """HTTP server and upload limits."""

    model_config = SettingsConfigDict(env_prefix="API_")

    host: str = "0.0.0.0"
    port: int = 8000
    debug: bool = False
    cors_origins: list[str] = ["*"]
    max_upload_size: int = 5 * 1024 * 1024
    # .pdf is accepted so the upload can be refused with a useful message
    allowed_extensions: list[str] = [".txt", ".pdf"]


class ExportSettings(BaseSettings):
    """Inventory PDF report."""

    model_config = SettingsConfigDict(env_prefix="EXPORT_")

    # TTF with Polish glyphs; without it the core font is used and text is transliterated
    font_path: Path | None = None
    organisation: str = "System Zarządzania Magazynem"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    app_name: str = "Stockroom"
    app_version: str = "1.0.0"
    environment: Literal["development", "staging", "production"] = "development"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    llm: LLMSettings = Field(default_factory=LLMSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    parser: ParserSettings = Field(default_factory=ParserSettings)
    ledger: LedgerSettings = Field(default_factory=LedgerSettings)
    api: APISettings = Field(default_factory=APISettings)
    export: ExportSettings = Field(default_factory=ExportSettings)

    @model_validator(mode="after")
    def ensure_data_dir(self) -> "Settings":
        self.storage.data_dir.mkdir(parents=True, exist_ok=True)
        return self


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide settings, read from the environment on first use."""
    return Settings()


def reset_settings() -> None:
    """Forget the cached settings so the next call re-reads the environment."""
    get_settings.cache_clear()
