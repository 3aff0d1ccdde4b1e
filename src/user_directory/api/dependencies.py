"""Dependency injection configuration for FastAPI app.

Uses FastAPI's app.state pattern for storing service instances.

Pattern:
    - Services stored in app.state during lifespan
    - Dependency functions retrieve from request.app.state
    - Clean separation, no global mutable state
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from user_directory.config import Settings, get_engine, get_redis_client
from user_directory.handlers import UserHandler
from user_directory.repositories import BcryptPasswordHasher, RedisUserCache, SqlUserRepository
from user_directory.services import UserService

logger = logging.getLogger(__name__)


def get_handler(request: Request) -> UserHandler:
    """Dependency injection for UserHandler from app.state.

    Args:
        request: FastAPI Request object

    Returns:
        The UserHandler instance from app.state

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "user_handler", None)
    if handler is None:
        raise RuntimeError("UserHandler not initialized. Check lifespan setup.")
    return handler


def build_user_service(config: Settings) -> UserService:
    """Wire the default SQL store, Redis cache and bcrypt hasher."""
    store = SqlUserRepository.create(engine=get_engine(config))
    cache = RedisUserCache.create(redis_client=get_redis_client(config))
    hasher = BcryptPasswordHasher(rounds=config.password_hash_rounds)
    return UserService.create(
        store=store,
        cache=cache,
        hasher=hasher,
        cache_ttl=config.users_cache_ttl,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores in app.state:
    1. Repositories (data access) - created explicitly unless a
       service was injected by create_app()
    2. Service (business logic) - stored in app.state.user_service
    3. Handler (HTTP endpoints) - stored in app.state.user_handler

    Args:
        app: The FastAPI application instance

    Yields:
        None

    Cleanup:
        Removes the handler (and any service built here) from app.state
    """
    config: Settings = app.state.settings

    owns_service = getattr(app.state, "user_service", None) is None
    if owns_service:
        app.state.user_service = build_user_service(config)

    user_service: UserService = app.state.user_service
    app.state.user_handler = UserHandler(
        user_service=user_service,
        expose_errors=config.is_development,
    )

    logger.info("User service initialized (environment=%s)", config.environment)
    logger.info("Cache TTL: %ds", user_service.cache_ttl)

    yield

    # Cleanup - remove from app.state
    del app.state.user_handler
    if owns_service:
        del app.state.user_service
    logger.info("User service shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[UserHandler, Depends(get_handler)]
