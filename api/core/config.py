from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database (default is an in-memory SQLite store, one per process)
    database_url: str = "sqlite://"
    database_echo: bool = False

    # App settings
    app_name: str = "EduLearn"
    debug: bool = False
    log_level: str = "INFO"

    # Session identity
    secret_key: str = "edulearn-development-secret-key-change-me"
    session_cookie_name: str = "edulearn_session"
    session_max_age_seconds: int = 24 * 60 * 60
    session_cookie_secure: bool = False

    # Populate an empty store with demo users, courses and coursework
    seed_demo_data: bool = True

    cors_origins: List[str] = [
        "http://localhost:3000",  # Local frontend development
        "http://localhost:5173",
    ]

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


@lru_cache
def get_settings() -> Settings:
    """Cached settings instance."""
    return Settings()
