"""Application configuration via environment variables."""
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """App settings loaded from .env or environment."""

    DATABASE_URL: str = "sqlite:///./caronae.db"
    CORS_ORIGINS: str = "http://localhost:3000"
    TIMEZONE: str = "America/Sao_Paulo"  # IANA tz rides are scheduled in
    DUPLICATE_WINDOW_HOURS: int = 3
    AROUND_DATE_MINUTES: int = 30
    ROUTINE_MAX_WEEKS: int = 52  # furthest repeats_until accepted, from the ride date

    class Config:
        env_file = ".env"


settings = Settings()
