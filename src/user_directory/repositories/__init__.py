"""Repository layer for data access.

This layer abstracts external dependencies (relational store, Redis, bcrypt)
behind protocol-based interfaces. This enables:
- Easy swapping of implementations (SQLite → PostgreSQL, Redis → in-memory, etc.)
- Unit testing with fake implementations
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
Any class implementing the required methods will satisfy the protocol.
"""

from user_directory.protocols import PasswordHasher, UserCache, UserStore

from .bcrypt_password_hasher import BcryptPasswordHasher
from .redis_cache_repository import ALL_USERS_KEY, RedisUserCache, user_key
from .sql_user_repository import SqlUserRepository

__all__ = [
    "UserStore",
    "UserCache",
    "PasswordHasher",
    "SqlUserRepository",
    "RedisUserCache",
    "BcryptPasswordHasher",
    "ALL_USERS_KEY",
    "user_key",
]
