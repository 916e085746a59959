from pydantic_settings import BaseSettings


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    database_url: str  # MongoDB URL including database name, e.g. mongodb://localhost/eduregistry
    redis_url: str = "redis://localhost:6379"
    host: str = "0.0.0.0"  # noqa: S104
    port: int = 7001
    debug: bool = False
    cors_origins: list[str] = []
    access_token_secret: str
    refresh_token_secret: str
    access_token_expiry_minutes: int = 15
    refresh_token_expiry_days: int = 7
    admin_email: str = "admin@eduregistry.local"  # Bootstrap admin account, created on first start
    admin_password: str = "admin"
    # Registration counters
    counter_ttl_seconds: int = 24 * 60 * 60  # Freshness of cached counter values
    counter_max_attempts: int = 5
    counter_retry_delay: float = 0.1  # Seconds, multiplied by the attempt number
    reconcile_query_timeout_ms: int = 5000  # Bound on durable-store scans during reconciliation

    model_config = {
        "env_file": [".env"],
        "env_prefix": "EDUREGISTRY_",
        "extra": "ignore",
    }
