from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Project Info
    PROJECT_NAME: str = "Agent Marketplace API"
    VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: str = Field(default="development", description="Environment: development, staging, production")

    # Database
    DATABASE_URL: str = Field(
        default="sqlite+aiosqlite:///./marketplace.db",
        description="Database URL (SQLite or PostgreSQL)"
    )
    DB_POOL_SIZE: int = Field(default=5, description="Database connection pool size")
    DB_MAX_OVERFLOW: int = Field(default=10, description="Database max overflow connections")
    DB_POOL_TIMEOUT: int = Field(default=30, description="Database pool timeout in seconds")
    DB_POOL_RECYCLE: int = Field(default=3600, description="Database pool recycle time in seconds")
    STORE_RETRY_ATTEMPTS: int = Field(default=3, description="Attempts for multi-row writes on transient store errors")
    STORE_RETRY_BACKOFF: float = Field(default=0.05, description="Base backoff in seconds between store retries")

    # API Keys
    API_KEY_PREFIX: str = Field(default="oc_live_", description="Literal prefix on every issued API key")
    API_KEY_BYTES: int = Field(default=32, description="Random bytes in an API key secret")
    API_KEY_HEADER: str = Field(default="X-API-Key", description="Primary header carrying the API key")

    @field_validator('API_KEY_BYTES')
    @classmethod
    def validate_api_key_bytes(cls, v: int) -> int:
        if v < 32:
            raise ValueError('API_KEY_BYTES must be at least 32 (256 bits)')
        return v

    # Call log
    API_LOG_DEFAULT_LIMIT: int = Field(default=50, description="Default number of call log entries returned")
    API_LOG_MAX_LIMIT: int = Field(default=200, description="Maximum number of call log entries returned")

    # Security - CORS
    BACKEND_CORS_ORIGINS: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8000"],
        description="Allowed CORS origins"
    )
    MAX_REQUEST_SIZE: int = Field(default=1048576, description="Max request body size in bytes (default 1MB)")

    # Server Configuration
    WORKERS: int = Field(default=4, description="Number of Uvicorn workers")
    HOST: str = Field(default="0.0.0.0", description="Server host")
    PORT: int = Field(default=8000, description="Server port")

    # Logging
    LOG_LEVEL: str = Field(default="INFO", description="Logging level (DEBUG, INFO, WARNING, ERROR)")
    LOG_DIR: str = Field(default="./logs", description="Directory for log files")
    LOG_RETENTION_DAYS: int = Field(default=30, description="Number of days to keep log files")
    LOG_MASK_SENSITIVE: bool = Field(default=True, description="Enable sensitive data masking in logs")
    LOG_ENABLE_REQUEST_LOGGING: bool = Field(default=True, description="Enable HTTP request/response logging")

    # Rate Limiting
    RATE_LIMIT_ENABLED: bool = Field(default=True, description="Enable rate limiting")
    RATE_LIMIT_DEFAULT: str = Field(default="100/minute", description="Default rate limit")
    RATE_LIMIT_STORAGE_URI: str = Field(default="memory://", description="Rate limit storage URI")
    RATE_LIMIT_TRUST_FORWARDED_FOR: bool = Field(
        default=False,
        description="Key rate limits on X-Forwarded-For (only behind a proxy that sets it)"
    )

    def get_log_level(self) -> str:
        """Get log level based on environment."""
        if self.ENVIRONMENT.lower() in ["development", "dev", "test"]:
            return "DEBUG"
        return self.LOG_LEVEL.upper()


settings = Settings()
