import logging
import os
from dataclasses import dataclass
from functools import lru_cache

import redis
from dotenv import load_dotenv
from sqlalchemy import Engine
from sqlmodel import create_engine

load_dotenv()


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables."""

    # Environment ("development" exposes internal error details in responses)
    environment: str = os.getenv("APP_ENV", "production")

    # Relational store
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./users.db")

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379")
    redis_password: str | None = os.getenv("REDIS_PASSWORD")

    # Cache
    users_cache_ttl: int = int(os.getenv("USERS_CACHE_TTL", "300"))  # 5 minutes

    # Security
    password_hash_rounds: int = int(os.getenv("PASSWORD_HASH_ROUNDS", "10"))
    jwt_secret: str = os.getenv("JWT_SECRET", "change-me")
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # API
    api_host: str = os.getenv("API_HOST", "0.0.0.0")
    api_port: int = int(os.getenv("API_PORT", "8000"))
    api_reload: bool = os.getenv("API_RELOAD", "true").lower() == "true"

    @property
    def is_development(self) -> bool:
        """Check whether internal error details may be sent to clients.

        Returns:
            True if running in the development environment, False otherwise
        """
        return self.environment.lower() == "development"

    def __post_init__(self) -> None:
        """Validate settings after initialization."""
        if self.users_cache_ttl <= 0:
            raise ValueError("USERS_CACHE_TTL must be a positive number of seconds")

        if not 4 <= self.password_hash_rounds <= 31:
            raise ValueError(
                f"PASSWORD_HASH_ROUNDS must be between 4 and 31, got {self.password_hash_rounds}"
            )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


def configure_logging(level: str | None = None) -> None:
    """Configure root logging for the service."""
    logging.basicConfig(
        level=(level or settings.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def get_redis_client(config: Settings | None = None) -> redis.Redis:
    """Create a Redis client instance."""
    config = config or settings
    return redis.from_url(
        config.redis_url,
        password=config.redis_password,
        decode_responses=False,
    )


def get_engine(config: Settings | None = None) -> Engine:
    """Create a SQLAlchemy engine for the relational store."""
    config = config or settings
    connect_args = {}
    if config.database_url.startswith("sqlite"):
        # FastAPI serves requests from a worker thread pool
        connect_args["check_same_thread"] = False
    return create_engine(config.database_url, pool_pre_ping=True, connect_args=connect_args)
