"""Application configuration with environment variables."""

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


PLACEHOLDER_JWT_SECRET = "change-this-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.01.00"

    # Database
    DATABASE_URL: str = "sqlite:///./recovery_crm.db"

    # Session Token
    JWT_SECRET: str = PLACEHOLDER_JWT_SECRET
    JWT_EXPIRES_HOURS: int = 24

    # CORS
    CORS_ORIGINS: str = "*"

    # File uploads (local disk, served from /uploads)
    UPLOAD_DIR: str = "uploads"
    MAX_UPLOAD_BYTES: int = 5 * 1024 * 1024

    # Day/week windows for dashboards are computed in this timezone
    BUSINESS_TIMEZONE: str = "Asia/Kolkata"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Error Tracking (optional, set in production)
    SENTRY_DSN: str = ""

    # Rate Limiting (requests per minute)
    RATE_LIMIT_AUTH: int = 10  # Login attempts
    RATE_LIMIT_API: int = 120  # General API

    @model_validator(mode="after")
    def _require_real_secret(self) -> "Settings":
        """Refuse the placeholder JWT secret outside dev/test."""
        if self.ENV not in ("dev", "test") and self.JWT_SECRET == PLACEHOLDER_JWT_SECRET:
            raise ValueError("JWT_SECRET must be set outside dev/test environments")
        return self

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def upload_url_prefix(self) -> str:
        return "/uploads"


settings = Settings()
