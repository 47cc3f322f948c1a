"""Configuration Management."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

DependencyStrategy = Literal["workspace", "package-registry", "cdn-style"]


class Settings(BaseSettings):
    """Toolkit settings from environment."""

    model_config = SettingsConfigDict(
        env_prefix="MIR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Ignore extra environment variables
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    json_logs: bool = Field(default=False, description="Use JSON log format")

    # Document
    schema_version: str = Field(default="1.0", description="Current document schema version")

    # Package resolution
    dependency_strategy: DependencyStrategy = Field(
        default="workspace", description="How generated imports are sourced"
    )
    cdn_base_url: str = Field(default="https://esm.sh", description="Base URL for cdn-style imports")

    # Network
    fetch_timeout: float = Field(default=10.0, gt=0, description="HTTP request timeout")
    breaker_fail_max: int = Field(default=5, gt=0, description="Failures before the breaker opens")
    breaker_reset_timeout: int = Field(default=30, gt=0, description="Seconds before a half-open retry")

    # Type declaration enrichment
    enrich_prop_options: bool = Field(default=True, description="Enrich prop options from type declarations")
    dts_cache_ttl: int = Field(default=60 * 60 * 24, gt=0, description="Declaration cache TTL (seconds)")
    dts_cache_dir: str | None = Field(default=None, description="Durable declaration cache directory")

    # Code generation
    enable_generation_cache: bool = Field(default=True, description="Memoize generated source")
    generation_cache_size: int = Field(default=64, gt=0, description="Generation cache max size")

    # External libraries ensured at bootstrap
    external_library_ids: list[str] = Field(default_factory=list, description="Libraries to load on start")


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
