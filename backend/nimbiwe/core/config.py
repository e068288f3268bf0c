"""Application configuration"""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./nimbiwe.db"
    ENVIRONMENT: str = "development"

    # CORS
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Rate limiting
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_PER_MINUTE: int = 30
    AUTH_RATE_LIMIT_PER_HOUR: int = 5
    REFRESH_RATE_LIMIT_PER_HOUR: int = 10

    # Tokens
    JWT_SECRET: str = "secretKey"
    JWT_REFRESH_SECRET: str = "refreshSecretKey"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_TTL_SECONDS: int = 900
    REFRESH_TOKEN_TTL_DAYS: int = 7
    OTP_TTL_SECONDS: int = 300

    # Sync pipeline
    DAILY_ENTRY_LIMIT: int = 3
    SYNC_MAX_BATCH_SIZE: int = 100

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "json"  # 'json' or 'text'

    # Seed sample reference data on startup
    SEED_DATA: bool = True

    class Config:
        env_file = ".env"


settings = Settings()
