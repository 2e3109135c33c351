"""Engine configuration using Pydantic settings."""

from functools import lru_cache
from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    # Application
    APP_NAME: str = "MA Retirement Engine"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # development, staging, production

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "text"  # text or json

    # Result cache
    CACHE_BACKEND: str = "none"  # none, memory, redis
    CACHE_TTL_SECONDS: int = 3600
    REDIS_URL: Optional[str] = None

    # ── Monte Carlo ──────────────────────────────────────────────────────────
    MONTE_CARLO_DEFAULT_TRIALS: int = 1000
    MONTE_CARLO_MAX_TRIALS: int = 1000
    MONTE_CARLO_DEFAULT_SEED: int = 20240402

    # ── Strategy optimizer ───────────────────────────────────────────────────
    OPTIMIZER_MAX_WORKERS: int = 1  # >1 evaluates grid cells on a thread pool
    OPTIMIZER_MIN_PENSION_AGE: int = 55
    OPTIMIZER_MAX_PENSION_AGE: int = 70
    DEFAULT_LIFE_EXPECTANCY: int = 85
    DEFAULT_SALARY_COLA_RATE: float = 0.025

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Only text and json renderers exist."""
        v = v.lower()
        if v not in ("text", "json"):
            raise ValueError("LOG_FORMAT must be 'text' or 'json'")
        return v

    @field_validator("CACHE_BACKEND")
    @classmethod
    def validate_cache_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in ("none", "memory", "redis"):
            raise ValueError("CACHE_BACKEND must be one of: none, memory, redis")
        return v

    @field_validator("MONTE_CARLO_MAX_TRIALS", "MONTE_CARLO_DEFAULT_TRIALS")
    @classmethod
    def validate_trials(cls, v: int) -> int:
        if v < 1 or v > 100_000:
            raise ValueError("Monte Carlo trial counts must be between 1 and 100000")
        return v

    @field_validator("OPTIMIZER_MAX_WORKERS")
    @classmethod
    def validate_workers(cls, v: int) -> int:
        if v < 1:
            raise ValueError("OPTIMIZER_MAX_WORKERS must be at least 1")
        return v

    @field_validator("DEFAULT_SALARY_COLA_RATE")
    @classmethod
    def validate_salary_cola(cls, v: float) -> float:
        if not 0 <= v <= 0.10:
            raise ValueError("DEFAULT_SALARY_COLA_RATE must be between 0 and 0.10")
        return v


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
