import logging
import secrets
from typing import Literal, Optional

from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # App
    app_name: str = "Metabolic Health"
    environment: Literal["development", "test", "production"] = "development"
    debug: bool = False
    log_level: str = "INFO"

    # Storage: "sql" uses database_url via SQLAlchemy, "memory" keeps everything in-process
    storage_backend: Literal["sql", "memory"] = "sql"
    database_url: str = "sqlite:///./metabolic_health.db"
    seed_on_startup: bool = True

    # Auth: JWT secret (required when environment=production)
    auth_secret_key: Optional[str] = None
    auth_token_ttl_seconds: int = 86400 * 7
    bcrypt_rounds: int = 12

    # Dashboard placeholder metric
    content_viewed_cap: int = 7

    class Config:
        env_file = ".env"


settings = Settings()

_ephemeral_secret: Optional[str] = None


class ConfigurationError(RuntimeError):
    """Raised at startup when a required setting is missing."""


def get_secret_key() -> str:
    """
    Return the JWT signing secret. Production refuses to start without AUTH_SECRET_KEY;
    elsewhere a random per-process key is generated (tokens die with the process).
    """
    global _ephemeral_secret
    if settings.auth_secret_key:
        return settings.auth_secret_key
    if settings.environment == "production":
        raise ConfigurationError("AUTH_SECRET_KEY must be set when ENVIRONMENT=production")
    if _ephemeral_secret is None:
        logger.warning("AUTH_SECRET_KEY not set; using a random per-process secret (sessions reset on restart)")
        _ephemeral_secret = secrets.token_hex(32)
    return _ephemeral_secret
