"""Application configuration loaded from environment variables."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is loaded from environment variables (or .env file)."""

    # --- App ---
    app_name: str = "AuraSync"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"
    environment: str = "development"  # development | staging | production

    # --- Database ---
    database_url: str  # postgres connection string for asyncpg
    db_pool_min_size: int = 2
    db_pool_max_size: int = 10

    # --- Auth tokens ---
    jwt_secret: str
    jwt_refresh_secret: str
    jwt_algorithm: str = "HS256"
    access_token_ttl_minutes: int = 15
    refresh_token_ttl_days: int = 7
    bcrypt_rounds: int = 10

    # --- Journal ---
    journal_encryption_key: str  # Fernet key (Fernet.generate_key())
    journal_token_ttl_minutes: int = 15
    journal_max_failed_attempts: int = 3
    journal_lockout_minutes: int = 15

    # --- Rate Limiting (applies to /api/ routes) ---
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 15 * 60

    # --- CORS ---
    cors_origins: list[str] = ["http://localhost:19006"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache
def get_settings() -> Settings:
    return Settings()  # type: ignore[call-arg]
