"""
Configuration Management

Uses Pydantic Settings for environment-based configuration.
Loads from .env file automatically.
"""

from typing import Optional
from functools import lru_cache
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # Google PageSpeed Insights (fast audit)
    GOOGLE_API_KEY: Optional[str] = None
    PAGESPEED_API_ENDPOINT: str = "https://www.googleapis.com/pagespeedonline/v5/runPagespeed"
    PAGESPEED_STRATEGY: str = "desktop"

    # DeepSeek (enrichment). Leaving the key unset runs on the rule-based fallback.
    DEEPSEEK_API_KEY: Optional[str] = None
    DEEPSEEK_BASE_URL: str = "https://api.deepseek.com/v1"
    DEEPSEEK_MODEL: str = "deepseek-chat"

    # Leads intake
    LEADS_API_ENDPOINT: str = "https://leads.effektivmedia.nu/api/leads"
    LEADS_API_KEY: Optional[str] = None

    # Application Settings
    ENVIRONMENT: str = "development"
    LOG_LEVEL: str = "INFO"

    # Timeouts (seconds)
    PAGESPEED_TIMEOUT: float = 60.0
    DEEPSEEK_TIMEOUT: float = 30.0
    LEADS_TIMEOUT: float = 15.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"  # Ignore extra fields in .env file
        case_sensitive = False  # Allow both UPPERCASE and lowercase

    @property
    def has_enrichment(self) -> bool:
        """Check if AI enrichment is configured."""
        return bool(self.DEEPSEEK_API_KEY)


@lru_cache
def get_settings() -> Settings:
    """Get or create cached settings instance."""
    return Settings()
