"""
Centralized configuration (pydantic-settings 2.x)
Fail-fast: a missing or invalid required setting aborts the process at import time.
"""
import logging
from pathlib import Path
from typing import List, Optional

from pydantic import AliasChoices, Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

DEFAULT_SECRET_KEY = "dev-secret-key-change-in-production"


def _resolve_env_path() -> Path:
    """Resolve .env next to this file (cwd-proof)."""
    return Path(__file__).resolve().parent / ".env"


_env_path = _resolve_env_path()


def normalize_database_url(url: str) -> str:
    """
    Normalize a database URL for SQLAlchemy (sync).
    - postgres:// and postgresql:// -> postgresql+psycopg2://
    - sqlite:// and explicit drivers are kept
    """
    s = url.strip().strip('"').strip("'")
    sl = s.lower()
    if sl.startswith("postgresql://"):
        return "postgresql+psycopg2://" + s[len("postgresql://"):]
    if sl.startswith("postgres://"):
        return "postgresql+psycopg2://" + s[len("postgres://"):]
    return s


def parse_db_scheme(url: str) -> str:
    """Extract database scheme from URL."""
    if not url:
        return "unknown"
    url_lower = url.lower()
    if url_lower.startswith("postgresql") or url_lower.startswith("postgres"):
        return "postgresql"
    if url_lower.startswith("sqlite"):
        return "sqlite"
    return "unknown"


def redact_database_url(url: str) -> str:
    """Redact password from database URL for safe logging."""
    if not url or "@" not in url or "://" not in url:
        return url
    scheme, rest = url.split("://", 1)
    creds, host = rest.rsplit("@", 1)
    user = creds.split(":", 1)[0]
    return f"{scheme}://{user}:***@{host}"


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_file=str(_env_path) if _env_path.exists() else None,
        case_sensitive=False,
        extra="ignore",
    )

    # ==================== ENVIRONMENT ====================
    ENVIRONMENT: str = "development"
    DEBUG: bool = False

    # ==================== API ====================
    API_HOST: str = "0.0.0.0"
    API_PORT: int = Field(default=3000, validation_alias=AliasChoices("PORT", "API_PORT"))

    # ==================== DATABASE ====================
    DATABASE_URL: str

    # ==================== REDIS (OPTIONAL) ====================
    REDIS_URL: Optional[str] = None

    # ==================== SECURITY ====================
    SECRET_KEY: str = DEFAULT_SECRET_KEY
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 30
    BCRYPT_ROUNDS: int = Field(default=12, ge=4, le=31)

    # ==================== CORS ====================
    CORS_ORIGINS: str = "*"

    # ==================== ADMIN (seed) ====================
    ADMIN_EMAIL: str = "admin@fitgenius.local"
    ADMIN_PASSWORD: str = "admin123456"

    # ==================== ASYNC EXECUTION ====================
    ENABLE_ASYNC: bool = True
    ASYNC_POOL_SIZE: int = Field(default=4, ge=1)

    # ==================== SCHEDULER ====================
    ENABLE_SCHEDULER: bool = True
    MEMBERSHIP_SWEEP_MINUTES: int = Field(default=60, ge=1)
    RATING_REFRESH_MINUTES: int = Field(default=30, ge=1)

    # ==================== EMAIL (contact forms) ====================
    EMAIL_HOST: Optional[str] = None
    EMAIL_PORT: int = 587
    EMAIL_USER: Optional[str] = None
    EMAIL_PASS: Optional[str] = None

    # ==================== RATE LIMITING ====================
    RATE_LIMIT_PER_MINUTE: int = Field(default=30, ge=1)

    @field_validator("DATABASE_URL", mode="before")
    @classmethod
    def validate_database_url(cls, v):
        """Accept SQLite or PostgreSQL only."""
        s = v.strip() if isinstance(v, str) else ""
        if not s:
            raise ValueError("DATABASE_URL is required.")
        out = normalize_database_url(s)
        if parse_db_scheme(out) == "unknown":
            raise ValueError("DATABASE_URL must be PostgreSQL (postgresql://) or SQLite (sqlite:///).")
        return out

    @model_validator(mode="after")
    def validate_production_secrets(self):
        if self.is_production and self.SECRET_KEY == DEFAULT_SECRET_KEY:
            raise ValueError("SECRET_KEY must be set when ENVIRONMENT=production.")
        return self

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT.lower() == "production"

    @property
    def redis_enabled(self) -> bool:
        return bool(self.REDIS_URL)

    @property
    def email_enabled(self) -> bool:
        """Contact features need host, user and password."""
        return all([self.EMAIL_HOST, self.EMAIL_USER, self.EMAIL_PASS])

    @property
    def cors_origins_list(self) -> List[str]:
        if not self.CORS_ORIGINS:
            return []
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


# Global settings instance (fail-fast).
try:
    settings = Settings()
except ValidationError as e:
    raise RuntimeError(f"Invalid configuration: {e}") from e

logger.info(f"Env: {settings.ENVIRONMENT}")
logger.info(f"DB: {redact_database_url(settings.DATABASE_URL)}")
logger.info(f"Redis enabled: {settings.redis_enabled}")
logger.info(f"Async executor enabled: {settings.ENABLE_ASYNC} (pool={settings.ASYNC_POOL_SIZE})")
logger.info(f"Scheduler enabled: {settings.ENABLE_SCHEDULER}")
if not settings.email_enabled:
    logger.warning("Email configuration not complete. Contact form features will be disabled.")
