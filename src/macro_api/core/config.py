"""Application configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Browser client shipped with the package
DEFAULT_STATIC_DIR = Path(__file__).resolve().parent.parent / "static"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Google Gemini Configuration
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.5-flash-preview-09-2025"
    gemini_base_url: str = "https://generativelanguage.googleapis.com/v1beta"

    # Upstream call behaviour
    upstream_timeout: float = 30.0  # Per-call transport timeout (seconds)
    text_max_retries: int = 5  # Attempts for /api/get-macros
    image_max_retries: int = 3  # Attempts for /api/analyze-image
    initial_backoff_ms: int = 1000  # Doubles after every failed attempt

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    static_dir: Path = DEFAULT_STATIC_DIR

    # Logging
    log_level: str = "INFO"

    # App
    debug: bool = False
    app_name: str = "Macro Lens API"
    api_version: str = "1.0.0"

    @property
    def is_llm_configured(self) -> bool:
        """Check if the Gemini API key is present."""
        return bool(self.gemini_api_key)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
