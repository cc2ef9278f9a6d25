"""Application settings and configuration management."""

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    # Application
    app_name: str = Field(default="Glossary Search")
    app_version: str = Field(default="1.0.0")
    debug: bool = Field(default=False)

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    workers: int = Field(default=1)

    # Storage
    database_url: str = Field(default="sqlite:///./dictionary.db")
    database_echo: bool = Field(default=False)

    # Matching limits (checked at the call site, the matcher itself is unbounded)
    max_text_length: int = Field(default=100_000)
    max_candidate_terms: int = Field(default=50_000)

    # Search Configuration
    default_search_limit: int = Field(default=100)
    max_search_limit: int = Field(default=1000)
    suggestion_threshold: float = Field(default=0.6)
    max_suggestions: int = Field(default=5)

    # Logging
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="json")

    # CORS
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080", "http://localhost:8000"]
    )

    # Anthropic (Claude) configuration for term extraction
    anthropic_api_key: Optional[str] = Field(default=None)
    anthropic_model: str = Field(default="claude-3-5-sonnet-20241022")
    anthropic_temperature: float = Field(default=0.3)
    anthropic_max_tokens: int = Field(default=500)
    llm_timeout: float = Field(default=30.0)  # seconds

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"  # Ignore extra environment variables
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached application settings."""
    return Settings()
