"""
Application Configuration
"""
from functools import lru_cache
from typing import Literal

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    # Application
    APP_NAME: str = "CaseVault"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False

    # Backend API
    API_BASE_URL: str = "http://localhost:8080/api"
    API_TOKEN: str = ""
    API_TIMEOUT_SECONDS: float = 30.0
    API_MAX_RETRIES: int = 2
    API_MAX_CONNECTIONS: int = 20

    # Evidence downloads
    DOWNLOAD_DIR: str = "./downloads"
    DEFAULT_DOWNLOAD_NAME: str = "evidence"

    # Access requests
    ALLOW_REREQUEST_AFTER_REJECTION: bool = True

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    @model_validator(mode="after")
    def validate_environment_settings(self) -> "Settings":
        """Validate critical settings for non-development environments."""
        if self.APP_ENV != "development":
            if not self.API_TOKEN:
                raise ValueError(
                    "API_TOKEN must be set in staging/production environments. "
                    "Set it in your .env file or environment variables."
                )

            if self.DEBUG:
                import warnings
                warnings.warn(
                    "DEBUG mode is enabled in a non-development environment. "
                    "This is not recommended for production.",
                    UserWarning,
                )

        if self.API_MAX_RETRIES < 0:
            raise ValueError("API_MAX_RETRIES cannot be negative")

        return self


@lru_cache()
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()


settings = get_settings()
