from typing import List

from pydantic_settings import BaseSettings
from pydantic import field_validator


class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql+asyncpg://user:password@db:5432/rental_db"
    DATABASE_SSL: bool = False
    REDIS_URL: str = "redis://localhost:6379/0"
    USER_MANAGEMENT_URL: str = "https://rent-managment-system-user-magt.onrender.com"
    AUTH_TIMEOUT_SECONDS: float = 5.0
    AUTH_BREAKER_FAIL_MAX: int = 3
    AUTH_BREAKER_RESET_TIMEOUT: int = 60
    SUBMIT_RATE_LIMIT_TIMES: int = 10
    SUBMIT_RATE_LIMIT_SECONDS: int = 60
    NOTIFICATION_CHANNEL_PREFIX: str = "user:"
    CORS_ORIGINS: List[str] = [
        "https://*.vercel.app",
        "http://localhost:5173",
    ]
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    @field_validator("DATABASE_URL")
    def normalize_database_url(cls, v):
        """
        Accepts plain postgres URLs (as handed out by most hosting providers)
        and rewrites them to the asyncpg driver used by the application.
        """
        if v.startswith("postgres://"):
            v = "postgresql://" + v[len("postgres://"):]
        if v.startswith("postgresql://"):
            v = "postgresql+asyncpg://" + v[len("postgresql://"):]
        return v

    @field_validator("LOG_LEVEL")
    def upper_log_level(cls, v):
        return v.upper()

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
