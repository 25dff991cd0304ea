"""
Application configuration using pydantic-settings.
All config is loaded from environment variables with sensible defaults.
"""

from typing import Optional
from pydantic_settings import BaseSettings
from functools import lru_cache


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "EventHub"
    APP_VERSION: str = "1.0.0"
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    PORT: int = 3000
    BASE_URL: Optional[str] = None  # defaults to http://localhost:{PORT}

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./eventhub.db"
    DATABASE_URL_SYNC: str = "sqlite:///./eventhub.db"
    AUTO_CREATE_TABLES: bool = True

    # Sessions
    SESSION_COOKIE_NAME: str = "eventhub_session"
    SESSION_COOKIE_SECURE: bool = False
    BCRYPT_ROUNDS: int = 12

    # SMTP (mail is skipped entirely when SMTP_HOST is unset)
    SMTP_HOST: Optional[str] = None
    SMTP_PORT: int = 465
    SMTP_SECURE: bool = True
    SMTP_USER: Optional[str] = None
    SMTP_PASS: Optional[str] = None
    SMTP_TIMEOUT: int = 10
    MAIL_FROM: str = "EventHub <no-reply@example.com>"

    # Events
    DEFAULT_CAPACITY: int = 50

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
        "extra": "ignore",
    }

    @property
    def base_url(self) -> str:
        return (self.BASE_URL or f"http://localhost:{self.PORT}").rstrip("/")


@lru_cache()
def get_settings() -> Settings:
    return Settings()
