"""Application settings loaded from environment variables.

Uses Pydantic Settings for validation and type coercion.
All config flows through this single module.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Research Portal application configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # API Keys
    anthropic_api_key: str = ""

    # LLM
    llm_model: str = "claude-sonnet-4-20250514"
    llm_max_tokens: int = 8192
    financial_temperature: float = 0.1
    earnings_temperature: float = 0.2

    # Document intake
    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MB
    max_document_chars: int = 100_000  # ~25K tokens
    max_pdf_pages: int = 100
    min_text_chars: int = 100

    # API server
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    # Output
    tool_name: str = "AI Research Portal"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings singleton."""
    return Settings()
