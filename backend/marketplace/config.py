"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./marketplace.db"
    SECRET_KEY: str = "dev-secret-key-change-me"
    TOKEN_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7
    PASSWORD_HASH_ROUNDS: int = 14  # scrypt log2(N)
    PROVIDER_REQUIRES_APPROVAL: bool = True
    PROPOSAL_VALIDITY_DAYS: int = 30
    BUSINESS_TIMEZONE: str = "UTC"  # IANA tz
    CORS_ORIGINS: str = "http://localhost:3000"
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"


settings = Settings()
