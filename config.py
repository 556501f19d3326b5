"""Configuration management for URL shortener."""

from typing import List, Optional
from pydantic_settings import BaseSettings
from pydantic import Field, field_validator


class Config(BaseSettings):
    """Application configuration."""

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind to"
    )

    port: int = Field(
        default=3001,
        description="Port to listen on"
    )

    # URL shortener settings
    base_url: str = Field(
        default="http://localhost:3001",
        description="Base URL for generating short URLs when the request carries no host"
    )

    path_prefix: str = Field(
        default="",
        description="Path prefix for short URLs (e.g., '/s' for /s/abc123)"
    )

    api_prefix: str = Field(
        default="",
        description="Prefix for the JSON routes (e.g., '/api'); the redirect route is never prefixed"
    )

    short_code_length: int = Field(
        default=6,
        ge=3,
        le=10,
        description="Length of generated short codes"
    )

    enable_custom_codes: bool = Field(
        default=True,
        description="Allow users to provide custom short codes"
    )

    max_collision_retries: int = Field(
        default=10,
        ge=1,
        description="Attempts per code length before a longer code is generated"
    )

    max_click_history: int = Field(
        default=1000,
        ge=0,
        description="Click events retained per short code"
    )

    cors_origins: List[str] = Field(
        default=["*"],
        description="Origins allowed to call the API from a browser"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    log_file: Optional[str] = Field(
        default=None,
        description="Log file path (logs to stdout if not specified)"
    )

    log_json: bool = Field(
        default=False,
        description="Use JSON format for logs"
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",  # Ignore extra environment variables
    }

    @field_validator("api_prefix", "path_prefix")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        """Normalize to a leading slash and no trailing slash ('' when unset)."""
        v = (v or "").strip().strip("/")
        return f"/{v}" if v else ""


def load_config() -> Config:
    """Load configuration from environment."""
    return Config()
