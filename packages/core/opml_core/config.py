"""
Feed validation configuration.

This module provides configuration settings for the feed validator
loaded from environment variables.
"""

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Find .env file in project root
_env_file = Path(__file__).parent.parent.parent.parent / ".env"


class ValidatorConfig(BaseSettings):
    """
    Feed validator configuration from environment variables.

    All settings are prefixed with OPML_ in environment.
    """

    model_config = SettingsConfigDict(
        env_prefix="OPML_",
        env_file=str(_env_file) if _env_file.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Per-attempt HTTP timeout in seconds, shared by every request in a batch
    timeout: float = Field(default=10.0, gt=0)
    max_attempts: int = Field(default=5, ge=1, le=20)
    initial_backoff: float = Field(default=1.0, ge=0)
    # None = one in-flight request per feed
    max_concurrency: int | None = Field(default=None, ge=1)
    follow_redirects: bool = True
    user_agent: str = "OPMLManager/0.1"
    log_level: str = "INFO"


# Global instance
validator_config = ValidatorConfig()
