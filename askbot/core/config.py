"""
Application configuration module.
Uses Pydantic's BaseSettings for type-safe configuration with environment variable support.
"""

import sys
from typing import List

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_BANNED_WORDS = [
    "spam",
    "scam",
    "http://",
    "https://",
    "telegram.me",
    "t.me/joinchat",
    "bit.ly",
    "tinyurl",
]


class Settings(BaseSettings):
    """
    Application settings.

    These are loaded from environment variables and validated by Pydantic.
    Environment variables take precedence over the default values specified here.
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        populate_by_name=True,
        # Allow extra fields in case we add more later without updating the model
        extra="ignore",
    )

    BOT_TOKEN: str = Field(..., alias="BOT_TOKEN")  # No default - must be set
    BOT_USERNAME: str = Field("", alias="BOT_USERNAME")
    ADMIN_ID: int = Field(0, alias="ADMIN_ID")
    PUBLIC_CHANNEL: str = Field("", alias="PUBLIC_CHANNEL")
    DB_URL: str = Field("sqlite+aiosqlite:///askbot.db", alias="DATABASE_URL")
    WEBHOOK_HOST: str = Field("", alias="WEBHOOK_HOST")
    WEBHOOK_PATH: str = Field("/webhook", alias="WEBHOOK_PATH")
    BOT_PORT: int = Field(8081, alias="BOT_PORT")
    DEBUG: bool = Field(False, alias="DEBUG")

    # Moderation
    MAX_TEXT_LENGTH: int = Field(2000, alias="MAX_TEXT_LENGTH")
    BANNED_WORDS: List[str] = Field(default_factory=lambda: list(DEFAULT_BANNED_WORDS), alias="BANNED_WORDS")

    # 0 keeps abandoned conversations forever
    SESSION_TTL_MINUTES: int = Field(0, alias="SESSION_TTL_MINUTES")


# Cache the settings instance
_settings = None


def get_settings() -> Settings:
    """
    Get the settings instance.

    Returns:
        Settings: The settings instance.
    """
    global _settings
    if _settings is None:
        try:
            _settings = Settings()
        except ValidationError as e:
            # Handle missing environment variables
            if "BOT_TOKEN" in str(e):
                print(f"Error: BOT_TOKEN environment variable is not set. {str(e)}")
                print("Please set the BOT_TOKEN environment variable and restart the application.")
                sys.exit(1)
            raise
    return _settings
