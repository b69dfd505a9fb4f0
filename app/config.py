"""Application configuration with comprehensive validation."""
from typing import Optional, Literal, List
from functools import lru_cache
from pathlib import Path
from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings with production-grade validation."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    APP_NAME: str = "Company Scoring Platform"
    APP_VERSION: str = "1.0.0"
    APP_ENV: Literal["development", "staging", "production"] = "development"
    DEBUG: bool = False
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    LOG_FORMAT: Literal["json", "console"] = "json"

    # API
    API_PREFIX: str = "/api"
    CORS_ORIGINS: List[str] = Field(default=["*"])

    # Store
    STORE_BACKEND: Literal["memory", "json"] = "memory"
    DATA_DIR: Path = Path("data")
    SEED_DEFAULT_CONFIGS: bool = True

    # Redis (optional read-through cache for scoring configs)
    REDIS_URL: str = "redis://localhost:6379/0"
    CACHE_ENABLED: bool = False
    CACHE_TTL_CONFIGS: int = Field(default=300, ge=1, le=86400)

    # Run polling (consumer-side policy)
    RUN_POLL_INTERVAL_SECONDS: float = Field(default=3.0, gt=0)

    # Analytics
    RADAR_MAX_COMPANIES: int = Field(default=4, ge=1, le=10)
    RANKING_LIMIT: int = Field(default=10, ge=1, le=100)

    # Evaluation worker
    EVALUATION_WORKER: Literal["none", "mock"] = "none"
    MOCK_WORKER_DELAY_SECONDS: float = Field(default=0.5, ge=0, le=60)

    @field_validator("API_PREFIX")
    @classmethod
    def validate_api_prefix(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError("API_PREFIX must start with '/'")
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_poll_interval(self):
        """Run detail polling must stay under 5 seconds."""
        if self.RUN_POLL_INTERVAL_SECONDS >= 5:
            raise ValueError(
                f"RUN_POLL_INTERVAL_SECONDS must be < 5, got {self.RUN_POLL_INTERVAL_SECONDS}"
            )
        return self

    @model_validator(mode="after")
    def validate_production_settings(self):
        """Ensure production has sane settings."""
        if self.APP_ENV == "production":
            if self.DEBUG:
                raise ValueError("DEBUG must be False in production")
            if self.EVALUATION_WORKER == "mock":
                raise ValueError("The mock evaluation worker cannot run in production")
        return self

    @property
    def state_dir(self) -> Optional[Path]:
        """Directory for JSON persistence, or None for the in-memory store."""
        return self.DATA_DIR if self.STORE_BACKEND == "json" else None


@lru_cache
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
