"""
Ordering Service — Configuration
All settings are read from environment variables (or .env file).
"""
from decimal import Decimal
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ── Service ──────────────────────────────────────────────
    SERVICE_NAME: str = "ordering"
    SERVICE_VERSION: str = "1.0.0"
    DEBUG: bool = False
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "INFO"
    APP_URL: str = "http://localhost:3000"

    # ── PostgreSQL (Order + Menu DB) ──────────────────────────
    POSTGRES_HOST: str = "ordering-db"
    POSTGRES_PORT: int = 5432
    POSTGRES_DB: str = "ordering_db"
    POSTGRES_USER: str = "ordering_user"
    POSTGRES_PASSWORD: str = "ordering_pass"
    DATABASE_URL: str | None = None  # full override, e.g. sqlite+aiosqlite:// in tests

    @property
    def database_url(self) -> str:
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.POSTGRES_HOST}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"
        )

    # ── Redis (idempotency cache + Celery broker) ─────────────
    REDIS_HOST: str = "redis"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_PASSWORD: str = ""

    @property
    def redis_url(self) -> str:
        if self.REDIS_PASSWORD:
            return f"redis://:{self.REDIS_PASSWORD}@{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"
        return f"redis://{self.REDIS_HOST}:{self.REDIS_PORT}/{self.REDIS_DB}"

    @property
    def celery_broker_url(self) -> str:
        return self.redis_url

    @property
    def celery_result_backend(self) -> str:
        return self.redis_url

    IDEMPOTENCY_KEY_TTL_SECONDS: int = 86400

    # ── JWT (decode only, shared secret) ──────────────────────
    JWT_SECRET_KEY: str = "CHANGE_ME_IN_PRODUCTION"
    JWT_ALGORITHM: str = "HS256"

    # ── Stripe ────────────────────────────────────────────────
    STRIPE_SECRET_KEY: str = ""
    STRIPE_WEBHOOK_SECRET: str = ""
    STRIPE_CURRENCY: str = "usd"
    STRIPE_TIMEOUT_SECONDS: float = 10.0

    # ── Transactional email (HTTP API) ────────────────────────
    EMAIL_API_URL: str = "https://api.resend.com/emails"
    EMAIL_API_KEY: str = ""
    EMAIL_FROM: str = "Phở Paradise <onboarding@resend.dev>"
    HTTP_TIMEOUT_SECONDS: float = 5.0

    # ── Checkout ──────────────────────────────────────────────
    DELIVERY_FEE: Decimal = Decimal("3.99")
    TRUST_CLIENT_TOTAL: bool = True

    # ── Kitchen simulation (dwell time per status) ────────────
    DWELL_PENDING_SECONDS: float = 6.0
    DWELL_PREPARING_SECONDS: float = 6.0
    DWELL_READY_SECONDS: float = 6.0
    AUTO_PROGRESS_INTERVAL_SECONDS: float = 5.0
    NOTIFY_ON_PROGRESS: bool = True

    # ── Observability ─────────────────────────────────────────
    METRICS_ENABLED: bool = True
    HEALTH_CHECK_TIMEOUT: float = 5.0


@lru_cache()
def get_settings() -> Settings:
    return Settings()
