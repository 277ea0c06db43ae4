"""
Configuration management for the laptop shop data layer.

Loads and validates environment variables for the application.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables or a ``.env`` file.
    """

    # Application
    APP_NAME: str = "laptopshop"
    LOG_LEVEL: str = "INFO"

    # Database
    DATABASE_URL: str = "sqlite:///laptopshop.db"
    DB_ECHO: bool = False
    DB_POOL_PRE_PING: bool = True
    QUERY_LOG_THRESHOLD_MS: int = 100

    # Password hashing
    PASSWORD_HASH_ROUNDS: int = 12

    # Login rate limiting
    LOGIN_MAX_FAILED_ATTEMPTS: int = 5
    LOGIN_FAILURE_WINDOW_SECONDS: int = 60
    LOGIN_BLOCK_SECONDS: int = 300

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )


# Global settings instance
settings = Settings()
