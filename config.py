from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration with env overrides.

    Environment variables are prefixed with `PROPCHAT_` and a `.env` file is supported.
    """

    model_config = SettingsConfigDict(
        env_prefix="PROPCHAT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unrelated variables (PORT, WEB_CONCURRENCY, ...)
    )

    # Paths
    data_dir: Path = Path("data")
    raw_dir: Path = Path("data")
    processed_dir: Path = Path("data/processed")
    processed_filename: str = "processedProperties.json"
    logs_dir: Path = Path("logs")

    # Gemini API
    gemini_api_key: str = Field(default="", description="Google Gemini API key for LLM inference")
    gemini_model: str = "gemini-1.5-flash"
    api_key_prefix: str = Field(
        default="AIza",
        description="Keys not starting with this prefix are treated as missing",
    )
    filter_temperature: float = 0.1
    summary_temperature: float = 0.7
    filter_max_tokens: int = 500
    summary_max_tokens: int = 150

    # API responses
    max_chat_results: int = 8
    default_list_limit: int = 50

    @property
    def processed_path(self) -> Path:
        return self.processed_dir / self.processed_filename


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
