"""
Configuration management for chelo.

Uses Pydantic Settings to load configuration from environment variables
with sensible defaults for local runs. The Challonge API key should be set
via the environment or a .env file, never committed.

Usage:
    from chelo.config import settings
    print(settings.cache_path)
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Every value can be overridden with a CHELO_-prefixed environment
    variable (e.g. CHELO_CACHE_PATH) or a .env file in the working directory.
    """

    model_config = SettingsConfigDict(
        env_prefix="CHELO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==========================================================================
    # Challonge API Configuration
    # ==========================================================================

    challonge_api_key: Optional[str] = Field(
        default=None,
        description="Challonge v1 API key (required to fetch uncached tournaments)",
    )
    challonge_base_url: str = Field(
        default="https://api.challonge.com/v1",
        description="Base URL of the Challonge v1 REST API",
    )
    http_timeout: float = Field(
        default=30.0,
        description="Timeout for each HTTP request (seconds)",
    )
    fetch_max_attempts: int = Field(
        default=1,
        description="Attempts per API request; 1 means a failed fetch is fatal immediately",
    )
    fetch_retry_base_delay: float = Field(
        default=2.0,
        description="Initial delay between retries (doubles each attempt)",
    )

    # ==========================================================================
    # File Locations
    # ==========================================================================

    input_path: str = Field(
        default="tournaments.txt",
        description="Newline-delimited list of tournament IDs to rate",
    )
    cache_path: str = Field(
        default="cache.json",
        description="JSON cache of normalized match results per tournament",
    )
    output_path: str = Field(
        default="ratings.json",
        description="Where the final player ratings are written",
    )

    # ==========================================================================
    # Rating Configuration
    # ==========================================================================

    elo_k_factor: float = Field(
        default=24.0,
        description="K-factor applied to every match",
    )
    elo_baseline: float = Field(
        default=1200.0,
        description="Offset added to every final rating",
    )
    elo_min_matches: int = Field(
        default=10,
        description="Players with fewer matches are left out of the output",
    )

    # ==========================================================================
    # Logging Configuration
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)",
    )

    # ==========================================================================
    # Validators
    # ==========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper_v

    @field_validator("elo_k_factor", "http_timeout")
    @classmethod
    def validate_positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("must be > 0")
        return v

    @field_validator("elo_min_matches")
    @classmethod
    def validate_min_matches(cls, v: int) -> int:
        if v < 0:
            raise ValueError("elo_min_matches must be >= 0")
        return v

    @field_validator("fetch_max_attempts")
    @classmethod
    def validate_attempts(cls, v: int) -> int:
        if v < 1:
            raise ValueError("fetch_max_attempts must be >= 1")
        return v


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Using lru_cache ensures we only load settings once,
    which is important because loading from .env can be slow.
    """
    return Settings()


# Convenience alias for importing
settings = get_settings()
