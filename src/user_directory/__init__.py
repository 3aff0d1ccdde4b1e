"""User Directory - user listing and profile management.

This package provides a layered architecture for user management:

Layers:
    - protocols: Interface contracts (UserStore, UserCache, PasswordHasher)
    - repositories: Data access implementations (SQLModel, Redis, bcrypt)
    - services: Business logic (authorization, validation, caching)
    - handlers: HTTP endpoint handlers
    - dto: Data transfer objects (API contracts)
    - entities: Domain models (internal)

Usage:
    ```python
    from user_directory.services import UserService

    service = UserService.create(store=store, cache=cache, hasher=hasher)
    ```

For HTTP API:
    ```python
    from user_directory.api.app import app
    ```
"""

from user_directory.config import get_redis_client, settings
from user_directory.dto import AccountResponse, UpdateUserRequest
from user_directory.entities import AccountChanges, AccountEntity, CallerIdentity, PrivilegeEntity
from user_directory.handlers import UserHandler
from user_directory.protocols import PasswordHasher, UserCache, UserStore
from user_directory.repositories import BcryptPasswordHasher, RedisUserCache, SqlUserRepository
from user_directory.services import UserService

__all__ = [
    # Configuration
    "settings",
    "get_redis_client",
    # Protocols (interfaces)
    "UserStore",
    "UserCache",
    "PasswordHasher",
    # Services (business logic)
    "UserService",
    # Handlers (HTTP)
    "UserHandler",
    # Repositories (data access)
    "SqlUserRepository",
    "RedisUserCache",
    "BcryptPasswordHasher",
    # Entities (domain models)
    "AccountEntity",
    "PrivilegeEntity",
    "CallerIdentity",
    "AccountChanges",
    # DTOs (API contracts)
    "AccountResponse",
    "UpdateUserRequest",
]
